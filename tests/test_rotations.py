"""Tests for quaternion helpers and the rotation path engine."""

import numpy as np
import pytest

from tiny_bloch import quaternion as quat
from tiny_bloch.config import AnimationConfig
from tiny_bloch.gates import Gate
from tiny_bloch.rotations import NORTH, Rotations, position
from tiny_bloch.state import KET0


@pytest.fixture
def rotations():
    return Rotations(64)


def complete(rotations, gate):
    applied = rotations.applied(gate)
    return rotations.get_rotation_at_percent(applied, 1.0)


# ---------------------------------------------------------------------------
# Quaternion helpers
# ---------------------------------------------------------------------------

def test_axis_angle_right_handed():
    q = quat.axis_angle([0, 0, 1], np.pi / 2)
    np.testing.assert_allclose(quat.rotate_vector(q, [1, 0, 0]), [0, 1, 0], atol=1e-12)


def test_axis_angle_rejects_zero_axis():
    with pytest.raises(ValueError):
        quat.axis_angle([0, 0, 0], 1.0)


def test_multiply_applies_right_operand_first():
    qx = quat.axis_angle([1, 0, 0], np.pi / 2)
    qz = quat.axis_angle([0, 0, 1], np.pi / 2)
    combined = quat.multiply(qz, qx)
    expected = quat.rotate_vector(qz, quat.rotate_vector(qx, [0, 1, 0]))
    np.testing.assert_allclose(quat.rotate_vector(combined, [0, 1, 0]), expected, atol=1e-12)


def test_slerp_endpoints_and_midpoint():
    q0 = quat.IDENTITY
    q1 = quat.axis_angle([0, 1, 0], np.pi / 2)
    np.testing.assert_allclose(quat.slerp(q0, q1, 0.0), q0, atol=1e-12)
    np.testing.assert_allclose(quat.slerp(q0, q1, 1.0), q1, atol=1e-12)
    np.testing.assert_allclose(quat.slerp(q0, q1, 0.5),
                               quat.axis_angle([0, 1, 0], np.pi / 4), atol=1e-12)


def test_slerp_shortest_flips_sign():
    q0 = quat.IDENTITY
    q1 = -quat.axis_angle([0, 0, 1], 0.2)
    mid = quat.slerp(q0, q1, 0.5)
    assert quat.angle_between(mid, quat.axis_angle([0, 0, 1], 0.1)) < 1e-9


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------

def test_starts_at_north_pole(rotations):
    np.testing.assert_allclose(rotations.current, quat.IDENTITY)
    np.testing.assert_allclose(rotations.current_position, NORTH)


def test_steps_from_config():
    assert Rotations(config=AnimationConfig(path_steps=8)).steps == 8
    with pytest.raises(ValueError):
        Rotations(0)


def test_endpoints(rotations):
    rotations.get_rotation_at_percent(rotations.applied(Gate.H), 1.0)
    before = rotations.current

    applied = rotations.applied(Gate.T)
    start = rotations.get_rotation_at_percent(applied, 0.0)
    np.testing.assert_allclose(start.pos, before, atol=1e-12)
    assert start.path == []

    end = rotations.get_rotation_at_percent(applied, 1.0)
    expected = quat.multiply(quat.axis_angle([0, 0, 1], np.pi / 4), before)
    np.testing.assert_allclose(end.pos, expected, atol=1e-12)
    np.testing.assert_allclose(rotations.current, expected, atol=1e-12)


def test_t_is_clamped(rotations):
    applied = rotations.applied(Gate.X)
    low = rotations.get_rotation_at_percent(applied, -0.5)
    np.testing.assert_allclose(low.pos, quat.IDENTITY)
    high = rotations.get_rotation_at_percent(applied, 1.5)
    np.testing.assert_allclose(high.position, [0, 0, -1], atol=1e-12)


def test_x_half_way_turns_right_handed(rotations):
    """Rx(π/2)|0⟩ has Bloch vector (0, -1, 0)."""
    applied = rotations.applied(Gate.X)
    half = rotations.get_rotation_at_percent(applied, 0.5)
    np.testing.assert_allclose(half.position, [0, -1, 0], atol=1e-12)


def test_partial_query_does_not_commit(rotations):
    applied = rotations.applied(Gate.X)
    rotations.get_rotation_at_percent(applied, 0.7)
    np.testing.assert_allclose(rotations.current, quat.IDENTITY)


def test_repeated_completion_commits_once(rotations):
    applied = rotations.applied(Gate.S)
    rotations.get_rotation_at_percent(applied, 1.0)
    once = rotations.current
    rotations.get_rotation_at_percent(applied, 1.0)
    np.testing.assert_allclose(rotations.current, once)


def test_world_frame_composition(rotations):
    """H then S: lab-frame axes give |+i⟩ at +y."""
    complete(rotations, Gate.H)
    np.testing.assert_allclose(rotations.current_position, [1, 0, 0], atol=1e-12)
    complete(rotations, Gate.S)
    np.testing.assert_allclose(rotations.current_position, [0, 1, 0], atol=1e-12)


def test_x_twice_returns_home(rotations):
    complete(rotations, Gate.X)
    complete(rotations, Gate.X)
    np.testing.assert_allclose(rotations.current_position, NORTH, atol=1e-12)


@pytest.mark.parametrize("sequence", [
    "H", "HS", "HT", "XY", "HSHT", "THSZYX", "HTHTHSHY",
])
def test_position_tracks_state(sequence):
    rotations = Rotations(16)
    state = KET0
    for name in sequence:
        gate = Gate.parse(name)
        state = state.apply(gate)
        complete(rotations, gate)
        np.testing.assert_allclose(rotations.current_position, state.bloch_vector(), atol=1e-9)


# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------

def test_path_grows_with_t(rotations):
    applied = rotations.applied(Gate.Y)
    assert len(rotations.get_rotation_at_percent(applied, 0.0).path) == 0
    assert len(rotations.get_rotation_at_percent(applied, 0.5).path) == 32
    full = rotations.get_rotation_at_percent(applied, 1.0).path
    assert len(full) == 64
    np.testing.assert_allclose(full[-1].pos, rotations.current, atol=1e-15)


def test_path_points_persist_between_queries(rotations):
    applied = rotations.applied(Gate.Z)
    first = rotations.get_rotation_at_percent(applied, 0.25).path
    first[0].ref = 7
    later = rotations.get_rotation_at_percent(applied, 0.75).path
    assert later[0] is first[0]
    assert later[0].ref == 7
    assert all(p.ref is None for p in later[1:])


def test_path_is_monotonic(rotations):
    applied = rotations.applied(Gate.X)
    points = rotations.get_rotation_at_percent(applied, 1.0).path
    angles = [quat.angle_between(quat.IDENTITY, p.pos) for p in points]
    assert all(b > a for a, b in zip(angles, angles[1:]))


def test_hadamard_path_circles_hadamard_axis(rotations):
    """Every keyframe keeps the same angle to the H axis."""
    axis = Gate.H.axis
    points = rotations.get_rotation_at_percent(rotations.applied(Gate.H), 1.0).path
    dots = [float(np.dot(p.position, axis)) for p in points]
    np.testing.assert_allclose(dots, np.dot(NORTH, axis), atol=1e-12)
    np.testing.assert_allclose(points[-1].position, [1, 0, 0], atol=1e-12)


def test_rotate_builders_match_gates(rotations):
    np.testing.assert_allclose(rotations.rotate_x(np.pi).quaternion(),
                               rotations.applied(Gate.X).quaternion())
    np.testing.assert_allclose(rotations.rotate_h(np.pi).quaternion(),
                               rotations.applied(Gate.H).quaternion())
    np.testing.assert_allclose(rotations.rotate_z(np.pi / 4).quaternion(),
                               rotations.applied(Gate.T).quaternion())


def test_new_gate_starts_from_committed_orientation(rotations):
    first = rotations.applied(Gate.X)
    rotations.get_rotation_at_percent(first, 0.5)
    # Switching gates mid-way starts the new one from the committed pose
    second = rotations.applied(Gate.Y)
    start = rotations.get_rotation_at_percent(second, 0.0)
    np.testing.assert_allclose(start.pos, quat.IDENTITY)


def test_reset(rotations):
    complete(rotations, Gate.H)
    applied = rotations.applied(Gate.X)
    rotations.get_rotation_at_percent(applied, 0.3)
    rotations.reset()
    np.testing.assert_allclose(rotations.current, quat.IDENTITY)
    np.testing.assert_allclose(position(rotations.current), NORTH)
    # A fresh query after reset builds a fresh path
    again = rotations.get_rotation_at_percent(applied, 0.3)
    assert all(p.ref is None for p in again.path)
