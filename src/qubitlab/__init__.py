"""
qubitlab: a small state vector quantum simulator with algorithm demos.

Features:
- StateVector engine: apply, measure, get_probabilities, get_state, reset
- Gate library: H, X, Y, Z, P, Rx, Ry, Rz, CNOT
- Drivers: Shor factoring, Grover search, QAOA, variational classifier
  and quantum k-means
- Seedable random source and cooperative cancellation for long runs

Quick Start:
    >>> from qubitlab import StateVector, gates
    >>> sv = StateVector(2, seed=42)
    >>> sv.apply(gates.H, [0])
    >>> sv.apply(gates.CNOT, [0, 1])
    >>> sv.get_probabilities()   # [0.5, 0, 0, 0.5]

Algorithms:
    >>> from qubitlab.algorithms import GroverSearch
    >>> GroverSearch(3, seed=1).search(5).found
    True
"""
__version__ = "1.0.0"

# Core components
from .core import (
    StateVector,
    QuantumState,
    SingleQubitGate,
    TwoQubitGate,
    QubitLabError,
    InvalidQubitCountError,
    QubitIndexError,
    UnsupportedGateError,
    DegenerateStateError,
    RunCancelledError,
    gates,
)
from .config import DriverConfig, DEFAULT_CONFIG
from .runtime import CancellationToken, run_in_background
from .logging_config import setup_logging

# Make algorithms accessible
from . import algorithms

__all__ = [
    # Core
    'StateVector',
    'QuantumState',
    'SingleQubitGate',
    'TwoQubitGate',
    'gates',
    # Errors
    'QubitLabError',
    'InvalidQubitCountError',
    'QubitIndexError',
    'UnsupportedGateError',
    'DegenerateStateError',
    'RunCancelledError',
    # Runtime
    'DriverConfig',
    'DEFAULT_CONFIG',
    'CancellationToken',
    'run_in_background',
    'setup_logging',
    # Submodules
    'algorithms',
]
