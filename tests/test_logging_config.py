import logging

from predsim.logging_config import ROOT_LOGGER, get_logger, log_birth, log_death, setup_logging


def test_get_logger_nests_under_the_package_logger():
    assert get_logger("world").name == "predsim.world"
    assert get_logger("predsim.behavior").name == "predsim.behavior"
    assert get_logger().name == ROOT_LOGGER


def test_setup_logging_writes_births_and_deaths_to_file(tmp_path):
    log_file = tmp_path / "runs" / "sim.log"
    logger = setup_logging("WARNING", log_file)
    try:
        log_birth(3, 12, (4, 7), 2)
        log_death(9, 4, 1, 17.0)
        get_logger("behavior").debug("target dropped")
    finally:
        for handler in logger.handlers:
            handler.close()

    text = log_file.read_text()
    assert "Run started" in text
    assert "BIRTH t=3 | agent=12 parents=(4, 7) gen=2" in text
    assert "DEATH t=9 | agent=4 gen=1 lived=17.0s" in text
    assert "target dropped" in text
    assert logger.handlers[0].level == logging.WARNING
