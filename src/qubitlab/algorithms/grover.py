"""
Grover search over the basis states of a small register.

The engine only offers single-qubit gates and CNOT, so the phase flip of
|1...1> is built as a phase polynomial. For n qubits

    x_0 x_1 ... x_{n-1} = 2^-(n-1) * sum over non-empty S of
                          (-1)^(|S|+1) * parity_S(x)

and each parity term becomes a CNOT ladder onto the highest qubit of S,
one phase gate, and the ladder undone. That is 2^n - 1 terms, fine for
the handful of qubits this simulator targets.

Usage:
    from qubitlab.algorithms import GroverSearch

    result = GroverSearch(3, seed=0).search(5)
    print(result.probability)   # ~0.945
"""
import logging
from dataclasses import dataclass
from itertools import combinations
from typing import List, Optional

import numpy as np

from ..config import DEFAULT_CONFIG, DriverConfig
from ..core import StateVector, QuantumState, gates
from ..runtime import CancellationToken, ProgressCallback, checkpoint

logger = logging.getLogger(__name__)


@dataclass
class GroverResult:
    """Snapshot of a search after some number of rounds."""
    target: int
    iterations: int
    probability: float
    found: bool


def optimal_iterations(num_qubits: int) -> int:
    """floor(pi/4 * sqrt(N)) rounds maximise the target amplitude."""
    return int(np.floor(np.pi / 4 * np.sqrt(2 ** num_qubits)))


class GroverSearch:
    """
    Amplitude amplification for a single marked basis state.

    Args:
        num_qubits: Register size; the search space is 2^num_qubits.
        seed: Seed for the simulator's random source.
        rng: Explicit random source (overrides ``seed``).
        config: Supplies the default register size.
    """

    def __init__(self, num_qubits: Optional[int] = None,
                 seed: Optional[int] = None,
                 rng: Optional[np.random.Generator] = None,
                 config: DriverConfig = DEFAULT_CONFIG):
        if num_qubits is None:
            num_qubits = config.grover_num_qubits
        self.num_qubits = num_qubits
        self.simulator = StateVector(num_qubits, seed=seed, rng=rng)
        self._phase_terms = self._build_phase_terms()

    def _build_phase_terms(self):
        n = self.num_qubits
        scale = np.pi / 2 ** (n - 1)
        terms = []
        for size in range(1, n + 1):
            sign = 1 if size % 2 else -1
            for subset in combinations(range(n), size):
                terms.append((subset, sign * scale))
        return terms

    # -- Circuit pieces -------------------------------------------------------

    def _flip_all_ones(self) -> None:
        """Multiply the amplitude of |1...1> by -1."""
        sim = self.simulator
        for subset, angle in self._phase_terms:
            *controls, last = subset
            for q in controls:
                sim.apply(gates.CNOT, [q, last])
            sim.apply(gates.P(angle), [last])
            for q in reversed(controls):
                sim.apply(gates.CNOT, [q, last])

    def _flip_zero_bits(self, value: int) -> None:
        for q in range(self.num_qubits):
            if not (value >> q) & 1:
                self.simulator.apply(gates.X, [q])

    def _oracle(self, target: int) -> None:
        self._flip_zero_bits(target)
        self._flip_all_ones()
        self._flip_zero_bits(target)

    def _diffusion(self) -> None:
        """Inversion about the mean (up to a global phase)."""
        sim = self.simulator
        for q in range(self.num_qubits):
            sim.apply(gates.H, [q])
        self._oracle(0)
        for q in range(self.num_qubits):
            sim.apply(gates.H, [q])

    def _prepare(self, target: int) -> None:
        if not 0 <= target < 2 ** self.num_qubits:
            raise ValueError(
                f"Target {target} outside search space [0, {2 ** self.num_qubits})"
            )
        self.simulator.reset()
        for q in range(self.num_qubits):
            self.simulator.apply(gates.H, [q])

    def _snapshot(self, target: int, iterations: int) -> GroverResult:
        probs = self.simulator.get_probabilities()
        return GroverResult(
            target=target,
            iterations=iterations,
            probability=float(probs[target]),
            found=int(np.argmax(probs)) == target,
        )

    # -- Entry points ---------------------------------------------------------

    def search_with_steps(self, target: int,
                          token: Optional[CancellationToken] = None,
                          progress: Optional[ProgressCallback] = None) -> List[GroverResult]:
        """
        Run the search, recording a result after every round.

        The first entry (iterations=0) is the uniform superposition.
        """
        self._prepare(target)
        rounds = optimal_iterations(self.num_qubits)
        logger.debug("Grover search for %d over %d qubits, %d rounds",
                     target, self.num_qubits, rounds)

        steps = [self._snapshot(target, 0)]
        for i in range(1, rounds + 1):
            checkpoint(token, progress, i - 1, rounds)
            self._oracle(target)
            self._diffusion()
            steps.append(self._snapshot(target, i))
            logger.debug("Round %d: P(target) = %.4f", i, steps[-1].probability)
        return steps

    def search(self, target: int,
               token: Optional[CancellationToken] = None,
               progress: Optional[ProgressCallback] = None) -> GroverResult:
        """Run the full search and return the final result."""
        result = self.search_with_steps(target, token=token, progress=progress)[-1]
        logger.info("Grover search for %d: P=%.4f found=%s",
                    target, result.probability, result.found)
        return result

    def measure(self) -> int:
        """Collapse the register and read the basis index."""
        bits = self.simulator.measure_all()
        return sum(bit << q for q, bit in enumerate(bits))

    def get_quantum_state(self) -> QuantumState:
        return self.simulator.get_state()
