"""Tests for the qubit state vector."""

import numpy as np
import pytest

from tiny_bloch import gates as g
from tiny_bloch.gates import Gate
from tiny_bloch.state import KET0, KET1, QubitState, equation_latex, mul_vec2

SQRT2_INV = 1 / np.sqrt(2)


# ---------------------------------------------------------------------------
# Closed-form gate results
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("gate,start,expected", [
    (Gate.X, KET0, [0, 1]),
    (Gate.Y, KET0, [0, 1j]),
    (Gate.Z, KET0, [1, 0]),
    (Gate.S, KET0, [1, 0]),
    (Gate.T, KET0, [1, 0]),
    (Gate.H, KET0, [SQRT2_INV, SQRT2_INV]),
    (Gate.X, KET1, [1, 0]),
    (Gate.Z, KET1, [0, -1]),
    (Gate.S, KET1, [0, 1j]),
    (Gate.T, KET1, [0, np.exp(1j * np.pi / 4)]),
    (Gate.H, KET1, [SQRT2_INV, -SQRT2_INV]),
])
def test_gate_on_basis_states(gate, start, expected):
    result = start.apply(gate)
    np.testing.assert_allclose(result.vector, expected, atol=1e-9)


def test_mul_vec2_returns_new_state():
    before = KET0
    after = mul_vec2(g.X, before)
    assert after is not before
    np.testing.assert_array_equal(before.vector, [1, 0])


def test_mul_vec2_rejects_wrong_shape():
    with pytest.raises(ValueError):
        mul_vec2(np.eye(3), KET0)


def test_from_vector_rejects_wrong_shape():
    with pytest.raises(ValueError):
        QubitState.from_vector([1, 0, 0])


def test_state_is_immutable():
    with pytest.raises(ValueError):
        KET0.vector[0] = 0


def test_normalize_option():
    state = QubitState(3, 4j, normalize=True)
    np.testing.assert_allclose(state.vector, [0.6, 0.8j], atol=1e-12)
    with pytest.raises(ValueError):
        QubitState(0, 0, normalize=True)


# ---------------------------------------------------------------------------
# Norm and involutions
# ---------------------------------------------------------------------------

def test_norm_preserved_over_long_sequence():
    rng = np.random.default_rng(7)
    gates = list(Gate)
    state = KET0
    for idx in rng.integers(0, len(gates), size=2000):
        state = state.apply(gates[idx])
        assert abs(state.norm - 1.0) < 1e-9


@pytest.mark.parametrize("gate", [Gate.X, Gate.Y, Gate.Z, Gate.H])
def test_involution_on_arbitrary_state(gate):
    state = QubitState(0.6, 0.8j).apply(Gate.T).apply(Gate.H)
    twice = state.apply(gate).apply(gate)
    assert twice.is_close(state, tol=1e-9)


def test_probabilities():
    state = KET0.apply(Gate.H)
    np.testing.assert_allclose(state.probabilities(), [0.5, 0.5], atol=1e-12)


# ---------------------------------------------------------------------------
# Bloch coordinates
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("sequence,expected", [
    ([], (0, 0, 1)),
    ([Gate.X], (0, 0, -1)),
    ([Gate.H], (1, 0, 0)),
    ([Gate.H, Gate.S], (0, 1, 0)),
    ([Gate.H, Gate.Z], (-1, 0, 0)),
    ([Gate.H, Gate.S, Gate.S, Gate.S], (0, -1, 0)),
])
def test_bloch_vector(sequence, expected):
    state = KET0
    for gate in sequence:
        state = state.apply(gate)
    np.testing.assert_allclose(state.bloch_vector(), expected, atol=1e-9)


def test_bloch_angles():
    theta, phi = KET0.apply(Gate.H).bloch_angles()
    assert theta == pytest.approx(np.pi / 2)
    assert phi == pytest.approx(0.0, abs=1e-9)

    theta, phi = KET0.apply(Gate.H).apply(Gate.S).bloch_angles()
    assert theta == pytest.approx(np.pi / 2)
    assert phi == pytest.approx(np.pi / 2)

    theta, phi = KET0.apply(Gate.H).apply(Gate.Z).apply(Gate.S).bloch_angles()
    assert phi == pytest.approx(3 * np.pi / 2)


def test_bloch_angles_at_poles():
    assert KET0.bloch_angles() == (0.0, 0.0)
    theta, phi = KET1.bloch_angles()
    assert theta == pytest.approx(np.pi)
    assert phi == 0.0


def test_global_phase_does_not_move_bloch_point():
    state = QubitState(0.6, 0.8j)
    shifted = QubitState(0.6 * 1j, 0.8j * 1j)
    np.testing.assert_allclose(state.bloch_vector(), shifted.bloch_vector(), atol=1e-12)


# ---------------------------------------------------------------------------
# Display
# ---------------------------------------------------------------------------

def test_to_latex():
    assert KET0.to_latex() == r"\begin{bmatrix} 1 \\ 0 \end{bmatrix}"
    assert KET1.apply(Gate.S).to_latex() == r"\begin{bmatrix} 0 \\ i \end{bmatrix}"
    assert KET0.apply(Gate.H).to_latex() == r"\begin{bmatrix} 0.7071 \\ 0.7071 \end{bmatrix}"


def test_equation_latex():
    after = KET0.apply(Gate.X)
    eq = equation_latex(Gate.X, KET0, after)
    assert eq.startswith("$$ X | \\psi \\rangle =")
    assert Gate.X.latex in eq
    assert KET0.to_latex() in eq
    assert eq.rstrip().endswith("$$")


def test_repr():
    assert repr(KET0.apply(Gate.H)) == "QubitState(0.7071, 0.7071)"
