# predsim/nn.py
import copy

import numpy as np
import torch
import torch.nn as nn

from predsim.errors import InputSizeMismatch
from predsim.logging_config import get_logger

logger = get_logger(__name__)

DEVICE = torch.device("cuda" if torch.cuda.is_available() else "cpu")
logger.debug(f"Using device: {DEVICE}")

activation_func = nn.Tanh()


class Layer(nn.Linear):
    """
    Dense layer. `weight` is (neurons x inputs), `bias` is (neurons,).
    `activations` holds whatever the last forward pass produced for this layer.
    """

    def __init__(self, n_inputs, n_neurons):
        super().__init__(n_inputs, n_neurons)
        self.activations = None

    @property
    def n_inputs(self):
        return self.in_features

    @property
    def n_neurons(self):
        return self.out_features

    @torch.no_grad()
    def mutate(self, chance, amount, rng):
        """
        Every weight and bias independently, with probability `chance`, gets a
        uniform kick in [-amount, amount]. Returns how many values were hit.
        """
        hit_count = 0
        for param in (self.weight, self.bias):
            shape = tuple(param.shape)
            hits = rng.random(shape) < chance
            kicks = np.where(hits, rng.uniform(-amount, amount, shape), 0.0)
            param.add_(torch.from_numpy(kicks).to(device=param.device, dtype=param.dtype))
            hit_count += int(hits.sum())
        return hit_count


class NeuralNetwork(nn.Module):
    def __init__(self, layer_sizes, rng=None):
        super().__init__()
        if len(layer_sizes) < 2:
            raise ValueError(f"a network needs at least two layer sizes, got {list(layer_sizes)}")
        self._shape = tuple(int(size) for size in layer_sizes)
        self.layers = nn.ModuleList()
        for i in range(len(self._shape) - 1):
            self.layers.append(Layer(self._shape[i], self._shape[i + 1]))
        self.to(DEVICE)

        rng = rng if rng is not None else np.random.default_rng()
        self.set_genome(rng.uniform(-1, 1, self.calculate_genome_length()))

    @property
    def shape(self):
        return self._shape

    @property
    def input_width(self):
        return self._shape[0]

    def forward(self, x):
        if x.shape[-1] != self._shape[0]:
            raise InputSizeMismatch(self._shape[0], x.shape[-1])
        # The last layer stays linear; its raw values are the network output.
        for i, layer in enumerate(self.layers):
            x = layer(x)
            if i < len(self.layers) - 1:
                x = activation_func(x)
            layer.activations = x.detach()
        return x

    @torch.no_grad()
    def evaluate(self, inputs):
        """Runs a forward pass on a plain sequence and returns a NumPy array."""
        input_tensor = torch.as_tensor(np.asarray(inputs, dtype=np.float32)).to(DEVICE)
        return self(input_tensor).cpu().numpy()

    def mutate(self, chance, amount, rng):
        hit_count = sum(layer.mutate(chance, amount, rng) for layer in self.layers)
        logger.debug(f"Mutated {hit_count} parameters (chance={chance}, amount={amount})")
        return hit_count

    def get_genome(self):
        genome = []
        for param in self.parameters():
            genome.append(param.data.detach().cpu().numpy().flatten())
        return np.concatenate(genome)

    def set_genome(self, genome):
        """
        Sets the network's weights and biases from a 1D NumPy array genome.
        """
        if not isinstance(genome, np.ndarray):
            genome = np.array(genome)
        if genome.size != self.calculate_genome_length():
            raise ValueError(
                f"genome has {genome.size} values, network {list(self._shape)} "
                f"needs {self.calculate_genome_length()}"
            )

        pointer = 0
        for param in self.parameters():
            num_elements = param.numel()
            chunk = genome[pointer : pointer + num_elements]
            param.data = torch.from_numpy(chunk).reshape(param.shape).float().to(DEVICE)
            pointer += num_elements

    def calculate_genome_length(self):
        return sum(p.numel() for p in self.parameters())

    def copy_layers(self):
        return [copy.deepcopy(layer) for layer in self.layers]

    def set_layer(self, index, layer):
        """Copies the values of `layer` into this network's layer `index`."""
        own = self.layers[index]
        if (own.n_inputs, own.n_neurons) != (layer.n_inputs, layer.n_neurons):
            raise ValueError(
                f"layer {index} is {own.n_inputs}->{own.n_neurons}, "
                f"cannot take {layer.n_inputs}->{layer.n_neurons}"
            )
        own.load_state_dict(layer.state_dict())

    def copy(self):
        return copy.deepcopy(self)
