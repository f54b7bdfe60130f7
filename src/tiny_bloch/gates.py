"""
Single-qubit gate definitions.

The supported gate set is closed: X, Y, Z, S, T and H. Each gate is a
fixed unitary matrix (numpy array) plus the Bloch-sphere rotation it
performs (axis and angle) and a LaTeX rendering of its matrix.

Gate names from the outside world are turned into ``Gate`` members by
``Gate.parse``; everything past that boundary works on the enum.
"""

from __future__ import annotations

from enum import Enum

import numpy as np
from numpy import ndarray

# Type alias
Matrix = ndarray

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------
_SQRT2_INV = 1.0 / np.sqrt(2.0)


def _frozen(m: ndarray) -> ndarray:
    m.setflags(write=False)
    return m


# ---------------------------------------------------------------------------
# Fixed gate matrices
# ---------------------------------------------------------------------------

I = _frozen(np.eye(2, dtype=np.complex128))
"""Identity gate."""

X = _frozen(np.array([[0, 1], [1, 0]], dtype=np.complex128))
"""Pauli-X (NOT) gate."""

Y = _frozen(np.array([[0, -1j], [1j, 0]], dtype=np.complex128))
"""Pauli-Y gate."""

Z = _frozen(np.array([[1, 0], [0, -1]], dtype=np.complex128))
"""Pauli-Z gate."""

S = _frozen(np.array([[1, 0], [0, 1j]], dtype=np.complex128))
"""S (phase) gate: sqrt(Z)."""

T = _frozen(np.array([[1, 0], [0, np.exp(1j * np.pi / 4)]], dtype=np.complex128))
"""T gate: sqrt(S)."""

H = _frozen(np.array([[1, 1], [1, -1]], dtype=np.complex128) * _SQRT2_INV)
"""Hadamard gate."""


# ---------------------------------------------------------------------------
# Bloch rotation axes
# ---------------------------------------------------------------------------

X_AXIS = _frozen(np.array([1.0, 0.0, 0.0]))
Y_AXIS = _frozen(np.array([0.0, 1.0, 0.0]))
Z_AXIS = _frozen(np.array([0.0, 0.0, 1.0]))
H_AXIS = _frozen(np.array([1.0, 0.0, 1.0]) * _SQRT2_INV)
"""Hadamard axis: halfway between +x and +z."""


class UnknownGateError(KeyError):
    """Raised when a gate name is not one of the supported gates."""

    def __init__(self, name: str) -> None:
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"Unknown gate: '{self.name}'. Available: {[g.value for g in Gate]}"


class Gate(Enum):
    """The supported single-qubit gates."""
    X = "X"
    Y = "Y"
    Z = "Z"
    S = "S"
    T = "T"
    H = "H"

    @classmethod
    def parse(cls, name: str) -> Gate:
        """
        Look up a gate by name (case-insensitive).

        Raises
        ------
        UnknownGateError
            If ``name`` is not a supported gate.
        """
        if isinstance(name, Gate):
            return name
        key = str(name).strip().upper()
        try:
            return cls(key)
        except ValueError:
            raise UnknownGateError(str(name)) from None

    @property
    def matrix(self) -> Matrix:
        return GATE_REGISTRY[self]["matrix"]

    @property
    def axis(self) -> ndarray:
        return GATE_REGISTRY[self]["axis"]

    @property
    def angle(self) -> float:
        return GATE_REGISTRY[self]["angle"]

    @property
    def latex(self) -> str:
        return GATE_REGISTRY[self]["latex"]


# ---------------------------------------------------------------------------
# Gate metadata registry
# ---------------------------------------------------------------------------

GATE_REGISTRY: dict[Gate, dict] = {
    Gate.X: {
        "matrix": X, "axis": X_AXIS, "angle": np.pi,
        "latex": r"\begin{bmatrix} 0 & 1 \\ 1 & 0 \end{bmatrix}",
    },
    Gate.Y: {
        "matrix": Y, "axis": Y_AXIS, "angle": np.pi,
        "latex": r"\begin{bmatrix} 0 & -i \\ i & 0 \end{bmatrix}",
    },
    Gate.Z: {
        "matrix": Z, "axis": Z_AXIS, "angle": np.pi,
        "latex": r"\begin{bmatrix} 1 & 0 \\ 0 & -1 \end{bmatrix}",
    },
    Gate.S: {
        "matrix": S, "axis": Z_AXIS, "angle": np.pi / 2,
        "latex": r"\begin{bmatrix} 1 & 0 \\ 0 & e^{i {\pi \over 2}} \end{bmatrix}",
    },
    Gate.T: {
        "matrix": T, "axis": Z_AXIS, "angle": np.pi / 4,
        "latex": r"\begin{bmatrix} 1 & 0 \\ 0 & e^{i {\pi \over 4}} \end{bmatrix}",
    },
    Gate.H: {
        "matrix": H, "axis": H_AXIS, "angle": np.pi,
        "latex": r"{1 \over \sqrt{2}} \begin{bmatrix} 1 & 1 \\ 1 & -1 \end{bmatrix}",
    },
}


def get_matrix(name: str) -> Matrix:
    """Look up a gate matrix by name. Raises UnknownGateError."""
    return Gate.parse(name).matrix


def is_unitary(m: ndarray, tol: float = 1e-10) -> bool:
    """Check U†U = I."""
    product = m.conj().T @ m
    return np.allclose(product, np.eye(m.shape[0]), atol=tol)
