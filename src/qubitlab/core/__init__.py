"""Core quantum computing components."""
from .statevector import StateVector, QuantumState
from .gates import SingleQubitGate, TwoQubitGate, Gate
from .errors import (
    QubitLabError,
    InvalidQubitCountError,
    QubitIndexError,
    UnsupportedGateError,
    DegenerateStateError,
    RunCancelledError,
)
from . import gates
from . import complex

__all__ = [
    'StateVector',
    'QuantumState',
    'SingleQubitGate',
    'TwoQubitGate',
    'Gate',
    'QubitLabError',
    'InvalidQubitCountError',
    'QubitIndexError',
    'UnsupportedGateError',
    'DegenerateStateError',
    'RunCancelledError',
    'gates',
    'complex',
]
