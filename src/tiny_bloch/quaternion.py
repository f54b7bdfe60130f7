"""
Unit quaternion helpers on plain numpy arrays.

Quaternions are scalar-first: q = [w, x, y, z]. A rotation by angle θ
about unit axis n is [cos(θ/2), sin(θ/2)·n]. Rotating a vector v is
q·v·q*, and the product q2·q1 applies q1 first, then q2.
"""
import numpy as np

IDENTITY = np.array([1.0, 0.0, 0.0, 0.0])
IDENTITY.setflags(write=False)


def axis_angle(axis, angle: float) -> np.ndarray:
    """Quaternion for a rotation of ``angle`` radians about ``axis``."""
    axis = np.asarray(axis, dtype=np.float64)
    n = np.linalg.norm(axis)
    if n < 1e-15:
        raise ValueError("Rotation axis must be non-zero")
    s = np.sin(angle / 2.0)
    v = axis / n * s
    return np.array([np.cos(angle / 2.0), v[0], v[1], v[2]])


def multiply(q1: np.ndarray, q2: np.ndarray) -> np.ndarray:
    """Hamilton product q1·q2."""
    w1, x1, y1, z1 = q1
    w2, x2, y2, z2 = q2
    return np.array([
        w1 * w2 - x1 * x2 - y1 * y2 - z1 * z2,
        w1 * x2 + x1 * w2 + y1 * z2 - z1 * y2,
        w1 * y2 - x1 * z2 + y1 * w2 + z1 * x2,
        w1 * z2 + x1 * y2 - y1 * x2 + z1 * w2,
    ])


def conjugate(q: np.ndarray) -> np.ndarray:
    return np.array([q[0], -q[1], -q[2], -q[3]])


def normalize(q: np.ndarray) -> np.ndarray:
    n = np.linalg.norm(q)
    return q / n if n > 1e-15 else q


def rotate_vector(q: np.ndarray, v) -> np.ndarray:
    """Rotate 3-vector ``v`` by unit quaternion ``q``."""
    p = np.array([0.0, v[0], v[1], v[2]])
    return multiply(multiply(q, p), conjugate(q))[1:]


def slerp(q0: np.ndarray, q1: np.ndarray, t: float,
          shortest: bool = True) -> np.ndarray:
    """
    Spherical linear interpolation from q0 (t=0) to q1 (t=1).

    With ``shortest`` the sign of q1 is flipped when needed so the
    interpolation takes the short arc. Without it the arc follows q1 as
    given, which keeps the sense of rotation of a half-turn.
    """
    dot = float(np.dot(q0, q1))
    if shortest and dot < 0.0:
        q1 = -q1
        dot = -dot

    dot = min(max(dot, -1.0), 1.0)
    theta_0 = np.arccos(dot)
    sin_theta_0 = np.sin(theta_0)

    if sin_theta_0 < 1e-12:
        # Nearly parallel: linear interpolation is accurate enough
        return normalize((1.0 - t) * q0 + t * q1)

    s0 = np.sin((1.0 - t) * theta_0) / sin_theta_0
    s1 = np.sin(t * theta_0) / sin_theta_0
    return s0 * q0 + s1 * q1


def angle_between(q0: np.ndarray, q1: np.ndarray) -> float:
    """Rotation angle (radians, [0, π]) taking q0 to q1."""
    dot = abs(float(np.dot(q0, q1)))
    return float(2.0 * np.arccos(min(dot, 1.0)))
