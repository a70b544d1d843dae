"""
Complex arithmetic helpers.

Amplitudes are plain Python ``complex`` values (or numpy ``complex128``
arrays), so every function here works elementwise on scalars and arrays
alike. Nothing mutates its arguments.
"""
import math

import numpy as np

from .errors import DegenerateStateError


def make_complex(real: float, imaginary: float = 0.0) -> complex:
    """Build a complex value, rejecting NaN and infinite parts."""
    if not (math.isfinite(real) and math.isfinite(imaginary)):
        raise ValueError(f"Complex parts must be finite, got ({real}, {imaginary})")
    return complex(real, imaginary)


def add(a, b):
    return np.add(a, b)


def multiply(a, b):
    """(a + bi)(c + di) = (ac - bd) + (ad + bc)i"""
    return np.multiply(a, b)


def conjugate(z):
    return np.conjugate(z)


def magnitude(z):
    """|z| = sqrt(re^2 + im^2)"""
    return np.hypot(np.real(z), np.imag(z))


def phase(z):
    """Argument of z in (-pi, pi]."""
    return np.arctan2(np.imag(z), np.real(z))


def scalar_multiply(z, scalar: float):
    return np.multiply(z, scalar)


def normalize(vector: np.ndarray) -> np.ndarray:
    """
    Scale a vector to unit 2-norm.

    Returns a new complex128 array; the input is left untouched.

    Raises
    ------
    DegenerateStateError
        If the norm is zero or not finite.
    """
    vector = np.asarray(vector, dtype=np.complex128)
    norm = np.sqrt(np.sum(np.abs(vector) ** 2))
    if norm == 0.0 or not np.isfinite(norm):
        raise DegenerateStateError(f"Cannot normalize vector with norm {norm}")
    return vector / norm
