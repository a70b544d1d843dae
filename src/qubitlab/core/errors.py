"""
Exceptions raised by the simulator core and the algorithm drivers.

All of them derive from :class:`QubitLabError`. The ones that signal a bad
argument also derive from the matching builtin (``ValueError``,
``IndexError``) so callers can catch either.
"""


class QubitLabError(Exception):
    """Base class for every qubitlab error."""


class InvalidQubitCountError(QubitLabError, ValueError):
    """Register constructed with a non-positive qubit count."""


class QubitIndexError(QubitLabError, IndexError):
    """Qubit index outside ``[0, num_qubits)``."""

    def __init__(self, qubit, num_qubits: int):
        self.qubit = qubit
        self.num_qubits = num_qubits
        super().__init__(
            f"Qubit index {qubit!r} out of range for {num_qubits}-qubit register"
        )


class UnsupportedGateError(QubitLabError, ValueError):
    """Gate kind and target list don't fit together."""


class DegenerateStateError(QubitLabError, ArithmeticError):
    """Attempt to normalize a vector with zero (or non-finite) norm."""


class RunCancelledError(QubitLabError):
    """Algorithm run stopped through its cancellation token."""
