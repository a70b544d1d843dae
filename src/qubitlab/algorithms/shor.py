"""
Shor-style integer factorization
================================
Random base selection, gcd shortcut and order finding. The counting
register is put into superposition on the simulator and returned to
|0...0> afterwards; the order itself is found classically.

Usage:
    from qubitlab.algorithms import ShorAlgorithm

    result = ShorAlgorithm(seed=1).factor(15)
    print(result.factors)   # [3, 5]
"""
import logging
from dataclasses import dataclass, field
from math import gcd
from typing import List, Optional

import numpy as np

from ..config import DEFAULT_CONFIG, DriverConfig
from ..core import StateVector, QuantumState, gates
from ..runtime import CancellationToken, ProgressCallback, checkpoint

logger = logging.getLogger(__name__)


@dataclass
class ShorResult:
    """Result of a factoring run."""
    n: int
    factors: List[int] = field(default_factory=list)
    iterations: int = 0
    success: bool = False

    def __str__(self) -> str:
        if self.success:
            return (f"Shor: {self.n} = {self.factors[0]} x {self.factors[1]} "
                    f"(iterations={self.iterations})")
        return f"Shor: Failed to factor {self.n}"


def find_order(a: int, n: int) -> int:
    """
    Smallest r >= 1 with a^r = 1 (mod n).

    Returns 1 when no such r < n exists (a and n not coprime), which the
    caller treats as an odd order and skips.
    """
    for r in range(1, n):
        if pow(a, r, n) == 1:
            return r
    return 1


class ShorAlgorithm:
    """
    Factoring driver on a private simulator register.

    Args:
        seed: Seed for base selection and the simulator.
        rng: Explicit random source (overrides ``seed``).
        config: Register size, counting qubits and iteration limit.
    """

    def __init__(self, seed: Optional[int] = None,
                 rng: Optional[np.random.Generator] = None,
                 config: DriverConfig = DEFAULT_CONFIG):
        self._rng = rng if rng is not None else np.random.default_rng(seed)
        self.config = config
        self.max_iterations = config.shor_max_iterations
        self.simulator = StateVector(config.shor_num_qubits, rng=self._rng)

    def _quantum_period_finding(self, a: int, n: int) -> int:
        counting = range(self.config.shor_counting_qubits)
        self.simulator.reset()

        for q in counting:
            self.simulator.apply(gates.H, [q])

        r = find_order(a, n)

        # Inverse transform on the counting register
        for q in counting:
            self.simulator.apply(gates.H, [q])

        return r

    def factor(self, n: int,
               token: Optional[CancellationToken] = None,
               progress: Optional[ProgressCallback] = None) -> ShorResult:
        """
        Try to split n into two non-trivial factors.

        Args:
            n: Integer to factor.
            token: Checked once per iteration.
            progress: Called with (iteration, max_iterations).

        Returns:
            ShorResult; ``factors`` is empty on failure.
        """
        if n < 2:
            return ShorResult(n, [], 0, False)

        if n % 2 == 0:
            return ShorResult(n, [2, n // 2], 1, True)

        logger.debug("Factoring %d (max %d iterations)", n, self.max_iterations)
        iterations = 0
        while iterations < self.max_iterations:
            checkpoint(token, progress, iterations, self.max_iterations)
            iterations += 1

            a = int(self._rng.integers(2, n))
            d = gcd(a, n)
            if d > 1:
                logger.debug("gcd shortcut: gcd(%d, %d) = %d", a, n, d)
                return ShorResult(n, [d, n // d], iterations, True)

            r = self._quantum_period_finding(a, n)
            logger.debug("a=%d has order %d mod %d", a, r, n)

            if r % 2 == 0:
                x = pow(a, r // 2, n)
                for f in (gcd(x - 1, n), gcd(x + 1, n)):
                    if 1 < f < n:
                        logger.info("Factored %d = %d x %d", n, f, n // f)
                        return ShorResult(n, [f, n // f], iterations, True)

        logger.info("Failed to factor %d after %d iterations", n, iterations)
        return ShorResult(n, [], iterations, False)

    def get_quantum_state(self) -> QuantumState:
        return self.simulator.get_state()


def factor(n: int, **kwargs) -> ShorResult:
    """Simple interface: ``factor(21, seed=3).factors``."""
    return ShorAlgorithm(**kwargs).factor(n)
