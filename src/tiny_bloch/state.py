"""
Single-qubit state vector.

A state is the pair of amplitudes (a, b) for |0⟩ and |1⟩. States are
immutable: applying a gate returns a new state. No re-normalization is
done after gate application; unitary gates keep the norm at 1 up to
floating point drift (well under 1e-9 for long gate sequences).
"""

from __future__ import annotations

from typing import Tuple, Union

import numpy as np

from .cplx import Complex, format_complex
from .gates import Gate, Matrix

Amplitude = Union[complex, Complex]


class QubitState:
    """
    Immutable qubit state |ψ⟩ = a|0⟩ + b|1⟩.

    Parameters
    ----------
    a, b : complex or Complex
        Amplitudes of |0⟩ and |1⟩.
    normalize : bool
        Scale the amplitudes to unit norm. Off by default; states
        produced by gate application are already normalized.
    """

    __slots__ = ("_data",)

    def __init__(self, a: Amplitude = 1.0, b: Amplitude = 0.0,
                 normalize: bool = False) -> None:
        data = np.array([complex(a), complex(b)], dtype=np.complex128)
        if normalize:
            norm = np.linalg.norm(data)
            if norm < 1e-15:
                raise ValueError("Cannot normalize the zero vector")
            data = data / norm
        data.setflags(write=False)
        self._data = data

    @classmethod
    def from_vector(cls, vector) -> QubitState:
        arr = np.asarray(vector, dtype=np.complex128)
        if arr.shape != (2,):
            raise ValueError(f"Expected 2 amplitudes, got shape {arr.shape}")
        return cls(arr[0], arr[1])

    # -- Properties ---------------------------------------------------------

    @property
    def vector(self) -> np.ndarray:
        """Amplitudes as a read-only complex128 array."""
        return self._data

    @property
    def a(self) -> complex:
        return complex(self._data[0])

    @property
    def b(self) -> complex:
        return complex(self._data[1])

    @property
    def amplitudes(self) -> Tuple[Complex, Complex]:
        return Complex.of(self.a), Complex.of(self.b)

    @property
    def norm(self) -> float:
        """sqrt(|a|² + |b|²), 1 up to drift."""
        return float(np.linalg.norm(self._data))

    def probabilities(self) -> np.ndarray:
        """Measurement probabilities [P(0), P(1)]."""
        return np.abs(self._data) ** 2

    # -- Gate application ---------------------------------------------------

    def apply(self, gate: Union[Gate, Matrix]) -> QubitState:
        matrix = gate.matrix if isinstance(gate, Gate) else gate
        return mul_vec2(matrix, self)

    # -- Bloch sphere -------------------------------------------------------

    def bloch_vector(self) -> Tuple[float, float, float]:
        """Bloch coordinates (x, y, z); |0⟩ is +z."""
        a, b = self._data
        ab = np.conj(a) * b
        x = 2 * np.real(ab)
        y = 2 * np.imag(ab)
        z = np.abs(a) ** 2 - np.abs(b) ** 2
        return (float(x), float(y), float(z))

    def bloch_angles(self) -> Tuple[float, float]:
        """
        Polar and azimuthal angles (θ, φ).

        θ = 2·acos(|a|), φ = arg(b) - arg(a) normalized to [0, 2π).
        φ is reported as 0 at the poles where it is undefined.
        """
        a, b = self._data
        theta = 2 * np.arccos(np.clip(np.abs(a), 0.0, 1.0))
        if np.abs(a) < 1e-12 or np.abs(b) < 1e-12:
            return (float(theta), 0.0)
        phi = np.mod(np.angle(b) - np.angle(a), 2 * np.pi)
        # mod can land on 2π after rounding
        if phi >= 2 * np.pi - 1e-12:
            phi = 0.0
        return (float(theta), float(phi))

    # -- Display ------------------------------------------------------------

    def to_latex(self, precision: int = 4) -> str:
        """Column vector of the amplitudes in LaTeX bmatrix form."""
        a = format_complex(self.a, precision)
        b = format_complex(self.b, precision)
        return rf"\begin{{bmatrix}} {a} \\ {b} \end{{bmatrix}}"

    def is_close(self, other: QubitState, tol: float = 1e-9) -> bool:
        return bool(np.allclose(self._data, other._data, atol=tol))

    def __eq__(self, other: object) -> bool:
        if isinstance(other, QubitState):
            return bool(np.array_equal(self._data, other._data))
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._data.tobytes())

    def __repr__(self) -> str:
        return f"QubitState({format_complex(self.a)}, {format_complex(self.b)})"


def mul_vec2(matrix: Matrix, state: QubitState) -> QubitState:
    """
    Complex matrix-vector product M|ψ⟩.

    ``matrix`` must be a 2x2 unitary; the result is not re-normalized.
    """
    m = np.asarray(matrix, dtype=np.complex128)
    if m.shape != (2, 2):
        raise ValueError(f"Expected a 2x2 matrix, got shape {m.shape}")
    return QubitState.from_vector(m @ state.vector)


def equation_latex(gate: Gate, before: QubitState, after: QubitState) -> str:
    """Display equation ``G|ψ⟩ = M · before = after``."""
    return (
        f"$$ {gate.value} | \\psi \\rangle =\n"
        f"  {gate.latex}\n"
        f"  \\cdot {before.to_latex()}\n"
        f"  = {after.to_latex()}\n"
        f"  $$"
    )


KET0 = QubitState(1, 0)
"""|0⟩, the starting state."""

KET1 = QubitState(0, 1)
"""|1⟩"""
