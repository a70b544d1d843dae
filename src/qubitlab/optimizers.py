"""
Gradient-free parameter update strategies.

A strategy sees the current parameters and the loss history and proposes
the next parameters to try. Drivers keep the best point themselves, so a
strategy is free to wander.
"""
from abc import ABC, abstractmethod
from typing import Sequence

import numpy as np


class ParameterStrategy(ABC):
    """Proposes the next parameter vector."""

    @abstractmethod
    def propose(self, parameters: np.ndarray, loss_history: Sequence[float],
                rng: np.random.Generator) -> np.ndarray:
        """Return a new parameter array with the same shape as ``parameters``."""


class RandomPerturbation(ParameterStrategy):
    """
    Uniform local step: each parameter moves by (u - 0.5) * step.

    Args:
        step: Width of the perturbation window (the learning rate).
    """

    def __init__(self, step: float = 0.1):
        self.step = step

    def propose(self, parameters, loss_history, rng):
        parameters = np.asarray(parameters, dtype=float)
        return parameters + (rng.random(parameters.shape) - 0.5) * self.step

    def __repr__(self) -> str:
        return f"RandomPerturbation(step={self.step})"


class RandomRestart(ParameterStrategy):
    """Ignore history and draw every parameter uniformly from [low, high)."""

    def __init__(self, low: float = 0.0, high: float = np.pi):
        if high <= low:
            raise ValueError(f"Empty range [{low}, {high})")
        self.low = low
        self.high = high

    def propose(self, parameters, loss_history, rng):
        shape = np.shape(parameters)
        return rng.uniform(self.low, self.high, size=shape)

    def __repr__(self) -> str:
        return f"RandomRestart(low={self.low}, high={self.high})"
