"""
State vector simulator.

Holds the full 2^n amplitude vector of a small register and updates it
gate by gate. Basis index bit i is the classical value of qubit i, so
|q1 q0> = |10> lives at index 2.

Memory usage: 2^n * 16 bytes (complex128)
    - 4 qubits: 256 B
    - 10 qubits: 16 KB
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

import numpy as np

from .complex import normalize
from .errors import (
    InvalidQubitCountError,
    QubitIndexError,
    UnsupportedGateError,
)
from .gates import SingleQubitGate, TwoQubitGate

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class QuantumState:
    """Read-only snapshot of a register."""
    amplitudes: np.ndarray
    num_qubits: int

    def probabilities(self) -> np.ndarray:
        return np.abs(self.amplitudes) ** 2

    def bitstring(self, index: int) -> str:
        """Basis label for an index, most significant qubit first."""
        return format(index, f"0{self.num_qubits}b")


class StateVector:
    """
    Quantum register backed by a numpy amplitude vector.

    Parameters
    ----------
    num_qubits : int
        Register size, fixed for the lifetime of the object.
    seed : int | None
        Seed for measurement sampling. Ignored when ``rng`` is given.
    rng : numpy.random.Generator | None
        Explicit random source for measurement sampling.

    Example
    -------
    >>> from qubitlab.core import StateVector, gates
    >>> sv = StateVector(2, seed=7)
    >>> sv.apply(gates.H, [0])
    >>> sv.apply(gates.CNOT, [0, 1])
    >>> sv.get_probabilities().round(3)
    array([0.5, 0. , 0. , 0.5])
    """

    def __init__(
        self,
        num_qubits: int,
        seed: Optional[int] = None,
        rng: Optional[np.random.Generator] = None,
    ):
        if isinstance(num_qubits, bool) or not isinstance(num_qubits, (int, np.integer)):
            raise InvalidQubitCountError(
                f"Qubit count must be an integer, got {type(num_qubits).__name__}"
            )
        if num_qubits <= 0:
            raise InvalidQubitCountError(f"Qubit count must be positive, got {num_qubits}")
        self.num_qubits = int(num_qubits)
        self.dim = 2 ** self.num_qubits
        self._rng = rng if rng is not None else np.random.default_rng(seed)
        self._indices = np.arange(self.dim)
        self._data = np.zeros(self.dim, dtype=np.complex128)
        self._data[0] = 1.0  # |00...0>

    def reset(self) -> None:
        """Reset to |00...0> state."""
        self._data = np.zeros(self.dim, dtype=np.complex128)
        self._data[0] = 1.0

    # -- Gate application ---------------------------------------------------

    def apply(self, gate, targets: Sequence[int]) -> None:
        """
        Apply a gate to the given qubits in place.

        A SingleQubitGate takes one target. A TwoQubitGate takes
        ``[control, target]`` and always performs the controlled bit flip.

        Raises
        ------
        TypeError
            If ``gate`` is not a SingleQubitGate or TwoQubitGate.
        UnsupportedGateError
            If the number of targets doesn't match the gate kind, or
            control and target coincide.
        QubitIndexError
            If a target is outside the register.
        """
        targets = list(targets)
        if isinstance(gate, SingleQubitGate):
            if len(targets) != 1:
                raise UnsupportedGateError(
                    f"Single-qubit gate {gate.name} needs 1 target, got {len(targets)}"
                )
            self._apply_single_qubit_gate(gate, self._check_qubit(targets[0]))
        elif isinstance(gate, TwoQubitGate):
            if len(targets) != 2:
                raise UnsupportedGateError(
                    f"Two-qubit gate {gate.name} needs 2 targets, got {len(targets)}"
                )
            control, target = (self._check_qubit(q) for q in targets)
            if control == target:
                raise UnsupportedGateError(
                    f"Control and target must differ, both are {control}"
                )
            self._apply_controlled_flip(gate, control, target)
        else:
            raise TypeError(f"Expected a gate, got {type(gate).__name__}")

    def _apply_single_qubit_gate(self, gate: SingleQubitGate, qubit: int) -> None:
        """
        Double-buffered 2x2 update.

        Every (i0, i1) pair differing only in bit ``qubit`` is read from the
        frozen old buffer and written once into a fresh one.
        """
        old = self._data
        old.flags.writeable = False
        mask = 1 << qubit
        i0 = self._indices[(self._indices & mask) == 0]
        i1 = i0 | mask
        (g00, g01), (g10, g11) = gate.matrix

        new = np.empty_like(old)
        new[i0] = g00 * old[i0] + g01 * old[i1]
        new[i1] = g10 * old[i0] + g11 * old[i1]
        self._data = normalize(new)

    def _apply_controlled_flip(self, gate: TwoQubitGate, control: int, target: int) -> None:
        # Only the CNOT permutation is implemented for two-qubit gates.
        if not gate.is_cnot:
            logger.warning(
                "Two-qubit gate %s is not CNOT; applying controlled bit flip anyway",
                gate.name,
            )
        old = self._data
        controlled = self._indices[(self._indices >> control) & 1 == 1]
        new = old.copy()
        new[controlled] = old[controlled ^ (1 << target)]
        self._data = new

    # -- Measurement --------------------------------------------------------

    def measure(self, qubit: int) -> int:
        """
        Measure a single qubit, collapse state, return result.

        The collapse is irreversible. Measuring the same qubit again with no
        gates in between returns the same outcome.
        """
        qubit = self._check_qubit(qubit)
        probs = np.abs(self._data) ** 2
        is_one = (self._indices >> qubit) & 1 == 1
        p1 = float(np.sum(probs[is_one]))
        p0 = float(np.sum(probs[~is_one]))

        # Scaling by the total keeps a certain outcome certain under rounding.
        r = self._rng.random()
        outcome = 0 if r * (p0 + p1) < p0 else 1

        keep = is_one if outcome else ~is_one
        collapsed = np.where(keep, self._data, 0)
        self._data = normalize(collapsed)

        logger.debug("Measured qubit %d -> %d (p0=%.6f)", qubit, outcome, p0)
        return outcome

    def measure_all(self) -> List[int]:
        """Measure qubits 0..n-1 in order, returning the outcome bits."""
        return [self.measure(q) for q in range(self.num_qubits)]

    # -- Read-only views ----------------------------------------------------

    def get_probabilities(self) -> np.ndarray:
        """Return measurement probabilities for all basis states."""
        return np.abs(self._data) ** 2

    def get_state(self) -> QuantumState:
        """Return an immutable copy of the amplitudes."""
        amplitudes = self._data.copy()
        amplitudes.flags.writeable = False
        return QuantumState(amplitudes=amplitudes, num_qubits=self.num_qubits)

    def expectation_z(self, qubit: int) -> float:
        """<Z> on one qubit: P(bit = 0) - P(bit = 1)."""
        qubit = self._check_qubit(qubit)
        probs = self.get_probabilities()
        is_one = (self._indices >> qubit) & 1 == 1
        return float(np.sum(probs[~is_one]) - np.sum(probs[is_one]))

    def _check_qubit(self, qubit) -> int:
        if isinstance(qubit, bool) or not isinstance(qubit, (int, np.integer)):
            raise QubitIndexError(qubit, self.num_qubits)
        if not 0 <= qubit < self.num_qubits:
            raise QubitIndexError(qubit, self.num_qubits)
        return int(qubit)

    def __repr__(self) -> str:
        return f"StateVector(qubits={self.num_qubits}, dim={self.dim})"
