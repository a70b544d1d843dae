"""
QAOA-style optimizer for a quadratic binary cost.

Minimizes E(s) = sum_{i<j} w_ij s_i s_j over bit vectors s, where W is a
symmetric cost matrix. Each candidate (gamma, beta) is run through p
layers of ZZ phase separation and an Rx mixer; the most probable basis
state of the final register is read off as the candidate solution.

Usage:
    from qubitlab.algorithms import QAOAAlgorithm

    qaoa = QAOAAlgorithm(3, cost_matrix=[[0, 1, -1], [1, 0, 1], [-1, 1, 0]])
    result = qaoa.solve(p=1)
    print(result.best_solution, result.energy)
"""
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

import numpy as np

from ..config import DEFAULT_CONFIG, DriverConfig
from ..core import StateVector, QuantumState, gates
from ..optimizers import ParameterStrategy, RandomRestart
from ..runtime import CancellationToken, ProgressCallback, checkpoint

logger = logging.getLogger(__name__)


@dataclass
class QAOAResult:
    """Result of QAOA optimization."""
    best_solution: List[int]           # s_i = value of qubit i
    energy: float                      # cost of best_solution
    parameters: Dict[str, List[float]] = field(default_factory=dict)  # gamma, beta
    iterations: int = 0


class QAOAAlgorithm:
    """
    Parameter search over QAOA circuits on a private register.

    Args:
        num_qubits: Number of binary variables.
        cost_matrix: Symmetric n x n weights (random in [-1, 1) if omitted).
        strategy: Proposes each new (gamma, beta) vector.
            Defaults to independent uniform draws in [0, pi).
        seed: Seed for the random source.
        rng: Explicit random source (overrides ``seed``).
        config: Supplies the iteration count.
    """

    def __init__(self, num_qubits: int,
                 cost_matrix: Optional[Sequence[Sequence[float]]] = None,
                 strategy: Optional[ParameterStrategy] = None,
                 seed: Optional[int] = None,
                 rng: Optional[np.random.Generator] = None,
                 config: DriverConfig = DEFAULT_CONFIG):
        self._rng = rng if rng is not None else np.random.default_rng(seed)
        self.num_qubits = num_qubits
        self.simulator = StateVector(num_qubits, rng=self._rng)
        self.strategy = strategy if strategy is not None else RandomRestart(0.0, np.pi)
        self.iterations = config.qaoa_iterations
        if cost_matrix is None:
            self._cost_matrix = self._random_cost_matrix()
        else:
            self._cost_matrix = self._validate(cost_matrix)

    def _random_cost_matrix(self) -> np.ndarray:
        n = self.num_qubits
        upper = np.triu(self._rng.uniform(-1.0, 1.0, size=(n, n)), k=1)
        return upper + upper.T

    def _validate(self, matrix) -> np.ndarray:
        m = np.array(matrix, dtype=float)
        n = self.num_qubits
        if m.shape != (n, n):
            raise ValueError(f"Cost matrix must be {n}x{n}, got shape {m.shape}")
        if not np.allclose(m, m.T):
            raise ValueError("Cost matrix must be symmetric")
        return m

    @property
    def cost_matrix(self) -> np.ndarray:
        return self._cost_matrix.copy()

    @cost_matrix.setter
    def cost_matrix(self, matrix) -> None:
        self._cost_matrix = self._validate(matrix)

    # -- Circuit ------------------------------------------------------------

    def _edges(self):
        n = self.num_qubits
        for i in range(n):
            for j in range(i + 1, n):
                if self._cost_matrix[i, j] != 0:
                    yield i, j, self._cost_matrix[i, j]

    def _apply_cost_layer(self, gamma: float) -> None:
        """exp(-i gamma w_ij Z_i Z_j / 2) per edge, as CNOT - Rz - CNOT."""
        sim = self.simulator
        for i, j, w in self._edges():
            sim.apply(gates.CNOT, [i, j])
            sim.apply(gates.Rz(gamma * w), [j])
            sim.apply(gates.CNOT, [i, j])

    def _apply_mixer_layer(self, beta: float) -> None:
        for q in range(self.num_qubits):
            self.simulator.apply(gates.Rx(2 * beta), [q])

    def cost(self, solution: Sequence[int]) -> float:
        """E(s) = sum_{i<j} w_ij s_i s_j"""
        s = np.asarray(solution, dtype=float)
        return float(np.sum(np.triu(self._cost_matrix, k=1) * np.outer(s, s)))

    def run_circuit(self, gamma: Sequence[float], beta: Sequence[float]):
        """
        Evaluate one parameter set.

        Returns:
            (solution, energy) for the most probable basis state.
        """
        self.simulator.reset()
        for q in range(self.num_qubits):
            self.simulator.apply(gates.H, [q])

        for g, b in zip(gamma, beta):
            self._apply_cost_layer(g)
            self._apply_mixer_layer(b)

        probs = self.simulator.get_probabilities()
        index = int(np.argmax(probs))
        solution = [(index >> q) & 1 for q in range(self.num_qubits)]
        return solution, self.cost(solution)

    # -- Optimization ---------------------------------------------------------

    def solve(self, p: int = 1,
              token: Optional[CancellationToken] = None,
              progress: Optional[ProgressCallback] = None) -> QAOAResult:
        """
        Search (gamma, beta) with the configured strategy.

        Args:
            p: Number of QAOA layers.
            token: Checked once per iteration.
            progress: Called with (iteration, total).

        Returns:
            QAOAResult holding the lowest-energy solution seen.
        """
        if p < 1:
            raise ValueError(f"Need at least one layer, got p={p}")

        best_energy = np.inf
        best_solution: List[int] = []
        best_params = {'gamma': [0.0], 'beta': [0.0]}
        history: List[float] = []
        params = np.zeros(2 * p)

        for it in range(self.iterations):
            checkpoint(token, progress, it, self.iterations)
            params = self.strategy.propose(params, history, self._rng)
            gamma, beta = params[:p], params[p:]

            solution, energy = self.run_circuit(gamma, beta)
            history.append(energy)

            if energy < best_energy:
                best_energy = energy
                best_solution = solution
                best_params = {'gamma': gamma.tolist(), 'beta': beta.tolist()}
                logger.debug("Iteration %d: energy %.4f for %s", it, energy, solution)

        logger.info("QAOA p=%d finished: energy %.4f", p, best_energy)
        return QAOAResult(
            best_solution=best_solution,
            energy=float(best_energy),
            parameters=best_params,
            iterations=self.iterations,
        )

    def get_quantum_state(self) -> QuantumState:
        return self.simulator.get_state()
