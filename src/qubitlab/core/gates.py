"""
Quantum gate definitions.

A gate is one of two kinds:

    - SingleQubitGate: a 2x2 unitary applied to one target qubit.
    - TwoQubitGate: a 4x4 matrix applied to (control, target). The engine
      only knows how to run the controlled bit flip, so in practice this
      is CNOT.

Gates are qubit-agnostic; the target indices are passed to
``StateVector.apply`` at call time.

Gate categories:
    - Fixed single-qubit: I, X, Y, Z, H
    - Parameterized single-qubit: P (phase), Rx, Ry, Rz
    - Two-qubit: CNOT
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

import numpy as np
from numpy import ndarray

# Type alias
Matrix = ndarray

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------
_SQRT2_INV = 1.0 / np.sqrt(2.0)

_CNOT_MATRIX = np.array(
    [
        [1, 0, 0, 0],
        [0, 1, 0, 0],
        [0, 0, 0, 1],
        [0, 0, 1, 0],
    ],
    dtype=np.complex128,
)


# ---------------------------------------------------------------------------
# Gate kinds
# ---------------------------------------------------------------------------

def _frozen_matrix(matrix, dim: int, kind: str) -> ndarray:
    m = np.array(matrix, dtype=np.complex128)
    if m.shape != (dim, dim):
        raise ValueError(f"{kind} needs a {dim}x{dim} matrix, got shape {m.shape}")
    m.flags.writeable = False
    return m


@dataclass(frozen=True, eq=False)
class SingleQubitGate:
    """A 2x2 gate acting on one qubit."""

    name: str
    matrix: Matrix

    def __post_init__(self) -> None:
        object.__setattr__(self, "matrix", _frozen_matrix(self.matrix, 2, "SingleQubitGate"))

    n_qubits = 1

    def __repr__(self) -> str:
        return f"SingleQubitGate({self.name!r})"


@dataclass(frozen=True, eq=False)
class TwoQubitGate:
    """
    A 4x4 gate acting on (control, target).

    The engine applies the controlled bit flip for every two-qubit gate,
    whatever the matrix says. ``is_cnot`` tells whether the matrix agrees.
    """

    name: str
    matrix: Matrix

    def __post_init__(self) -> None:
        object.__setattr__(self, "matrix", _frozen_matrix(self.matrix, 4, "TwoQubitGate"))

    n_qubits = 2

    @property
    def is_cnot(self) -> bool:
        return bool(np.array_equal(self.matrix, _CNOT_MATRIX))

    def __repr__(self) -> str:
        return f"TwoQubitGate({self.name!r})"


Gate = Union[SingleQubitGate, TwoQubitGate]


# ---------------------------------------------------------------------------
# Single-qubit fixed gates
# ---------------------------------------------------------------------------

I = SingleQubitGate("I", np.eye(2))
"""Identity gate."""

X = SingleQubitGate("X", [[0, 1], [1, 0]])
"""Pauli-X (NOT) gate."""

Y = SingleQubitGate("Y", [[0, -1j], [1j, 0]])
"""Pauli-Y gate."""

Z = SingleQubitGate("Z", [[1, 0], [0, -1]])
"""Pauli-Z gate."""

H = SingleQubitGate("H", np.array([[1, 1], [1, -1]]) * _SQRT2_INV)
"""Hadamard gate."""

# ---------------------------------------------------------------------------
# Single-qubit parameterized gates
# ---------------------------------------------------------------------------

def P(theta: float) -> SingleQubitGate:
    """Phase gate: P(theta)|1> = e^(i theta)|1>."""
    return SingleQubitGate("P", [[1, 0], [0, np.exp(1j * theta)]])


def Rx(theta: float) -> SingleQubitGate:
    """Rotation around X-axis by angle theta."""
    c = np.cos(theta / 2)
    s = np.sin(theta / 2)
    return SingleQubitGate("Rx", [[c, -1j * s], [-1j * s, c]])


def Ry(theta: float) -> SingleQubitGate:
    """Rotation around Y-axis by angle theta."""
    c = np.cos(theta / 2)
    s = np.sin(theta / 2)
    return SingleQubitGate("Ry", [[c, -s], [s, c]])


def Rz(theta: float) -> SingleQubitGate:
    """Rotation around Z-axis by angle theta."""
    return SingleQubitGate(
        "Rz", [[np.exp(-1j * theta / 2), 0], [0, np.exp(1j * theta / 2)]]
    )


# ---------------------------------------------------------------------------
# Two-qubit gates
# ---------------------------------------------------------------------------

CNOT = TwoQubitGate("CNOT", _CNOT_MATRIX)
"""Controlled-NOT: |c,t> -> |c, t XOR c>."""
CX = CNOT

# Long names
hadamard = H
pauli_x = X
pauli_y = Y
pauli_z = Z
cnot = CNOT
phase_gate = P
rotation_x = Rx
rotation_y = Ry
rotation_z = Rz


# ---------------------------------------------------------------------------
# Gate registry
# ---------------------------------------------------------------------------

GATE_REGISTRY: dict[str, dict] = {
    "i": {"gate": I, "n_params": 0},
    "id": {"gate": I, "n_params": 0},
    "x": {"gate": X, "n_params": 0},
    "y": {"gate": Y, "n_params": 0},
    "z": {"gate": Z, "n_params": 0},
    "h": {"gate": H, "n_params": 0},
    "p": {"factory": P, "n_params": 1},
    "phase": {"factory": P, "n_params": 1},
    "rx": {"factory": Rx, "n_params": 1},
    "ry": {"factory": Ry, "n_params": 1},
    "rz": {"factory": Rz, "n_params": 1},
    "cx": {"gate": CNOT, "n_params": 0},
    "cnot": {"gate": CNOT, "n_params": 0},
}


def get_gate(name: str, params: tuple[float, ...] = ()) -> Gate:
    """
    Look up a gate by name, with optional parameters.

    Parameters
    ----------
    name : str
        Gate name (case-insensitive).
    params : tuple of float
        Parameters for parameterized gates.

    Returns
    -------
    SingleQubitGate or TwoQubitGate

    Raises
    ------
    KeyError
        If gate name is not found.
    ValueError
        If wrong number of parameters provided.
    """
    key = name.lower()
    if key not in GATE_REGISTRY:
        raise KeyError(f"Unknown gate: '{name}'. Available: {sorted(GATE_REGISTRY.keys())}")

    info = GATE_REGISTRY[key]
    n_params = info["n_params"]

    if n_params == 0:
        if params:
            raise ValueError(f"Gate '{name}' takes no parameters, got {len(params)}")
        return info["gate"]
    if len(params) != n_params:
        raise ValueError(
            f"Gate '{name}' requires {n_params} parameter(s), got {len(params)}"
        )
    return info["factory"](*params)


def is_unitary(gate, tol: float = 1e-9) -> bool:
    """Check U U^dagger = I for a gate or a bare matrix."""
    m = gate.matrix if isinstance(gate, (SingleQubitGate, TwoQubitGate)) else np.asarray(gate)
    product = m @ m.conj().T
    return bool(np.allclose(product, np.eye(len(m)), atol=tol))
