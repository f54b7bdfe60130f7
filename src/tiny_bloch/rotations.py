"""
Rotation path engine.

Turns gate applications into orientation paths on the Bloch sphere.
Orientations are unit quaternions acting on the marker, which starts at
the north pole (|0⟩). Gate rotations are composed in the fixed lab
frame: the target of a gate is ``r(axis, angle) · current``.

The engine is independent of wall-clock time; callers ask for the
orientation at a progress value ``t`` in [0, 1].
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import numpy as np

from . import quaternion as quat
from .config import DEFAULT_CONFIG, AnimationConfig
from .gates import H_AXIS, X_AXIS, Y_AXIS, Z_AXIS, Gate

logger = logging.getLogger(__name__)

NORTH = np.array([0.0, 0.0, 1.0])
"""Marker position for the identity orientation (|0⟩)."""
NORTH.setflags(write=False)


def position(orientation: np.ndarray) -> np.ndarray:
    """Marker point on the unit sphere for an orientation."""
    return quat.rotate_vector(orientation, NORTH)


@dataclass(frozen=True, eq=False)
class AppliedGate:
    """
    A requested rotation: ``angle`` radians about the lab-frame ``axis``.

    Instances compare by identity so that two X gates queued back to
    back stay distinct.
    """
    name: str
    axis: Tuple[float, float, float]
    angle: float

    def quaternion(self) -> np.ndarray:
        return quat.axis_angle(self.axis, self.angle)


@dataclass(eq=False)
class PathPoint:
    """
    One keyframe of a rotation path.

    ``ref`` is a handle into the renderer's marker table, or None while
    no marker has been drawn for this keyframe.
    """
    pos: np.ndarray
    ref: Optional[int] = None

    @property
    def position(self) -> np.ndarray:
        return position(self.pos)


@dataclass
class Rotation:
    """Orientation at some progress plus the keyframes reached so far."""
    pos: np.ndarray
    path: List[PathPoint] = field(default_factory=list)

    @property
    def position(self) -> np.ndarray:
        return position(self.pos)


@dataclass(eq=False)
class _ActivePath:
    gate: AppliedGate
    start: np.ndarray
    end: np.ndarray
    points: List[PathPoint]
    done: bool = False


class Rotations:
    """
    Tracks the committed Bloch orientation and builds gate paths.

    Parameters
    ----------
    steps : int, optional
        Keyframes per gate path. Defaults to ``config.path_steps``.
    config : AnimationConfig, optional
    """

    def __init__(self, steps: Optional[int] = None,
                 config: AnimationConfig = DEFAULT_CONFIG) -> None:
        self.steps = steps if steps is not None else config.path_steps
        if self.steps < 1:
            raise ValueError(f"steps must be at least 1, got {self.steps}")
        self._current = quat.IDENTITY.copy()
        self._active: Optional[_ActivePath] = None

    # -- Properties ---------------------------------------------------------

    @property
    def current(self) -> np.ndarray:
        """Committed orientation (the base for the next gate)."""
        return self._current.copy()

    @property
    def current_position(self) -> np.ndarray:
        return position(self._current)

    # -- Applied gate builders ----------------------------------------------

    def rotate_x(self, angle: float) -> AppliedGate:
        return AppliedGate("X", tuple(X_AXIS), float(angle))

    def rotate_y(self, angle: float) -> AppliedGate:
        return AppliedGate("Y", tuple(Y_AXIS), float(angle))

    def rotate_z(self, angle: float) -> AppliedGate:
        return AppliedGate("Z", tuple(Z_AXIS), float(angle))

    def rotate_h(self, angle: float) -> AppliedGate:
        """Rotation about the Hadamard axis (x + z)/√2."""
        return AppliedGate("H", tuple(H_AXIS), float(angle))

    def applied(self, gate: Gate) -> AppliedGate:
        """The Bloch rotation performed by ``gate``."""
        return AppliedGate(gate.value, tuple(gate.axis), float(gate.angle))

    # -- Interpolation ------------------------------------------------------

    def _begin(self, gate: AppliedGate) -> _ActivePath:
        start = self._current.copy()
        end = quat.normalize(quat.multiply(gate.quaternion(), start))
        points = [
            PathPoint(quat.slerp(start, end, i / self.steps, shortest=False))
            for i in range(1, self.steps)
        ]
        points.append(PathPoint(end.copy()))
        return _ActivePath(gate=gate, start=start, end=end, points=points)

    def get_rotation_at_percent(self, gate: AppliedGate, t: float) -> Rotation:
        """
        Orientation after ``t`` of ``gate``'s rotation.

        ``t`` is clamped to [0, 1]. At 0 this is the pre-gate orientation;
        at 1 it is the exact post-gate orientation, which becomes the
        committed orientation for the next gate. The returned path holds
        the keyframes at fractions ``i/steps <= t``; the same PathPoint
        objects are returned on every query for this gate.
        """
        t = min(max(float(t), 0.0), 1.0)

        active = self._active
        if active is None or active.gate is not gate:
            if active is not None and not active.done:
                logger.debug("Dropping unfinished %s rotation", active.gate.name)
            active = self._active = self._begin(gate)

        if t >= 1.0:
            pos = active.end.copy()
            if not active.done:
                self._current = active.end.copy()
                active.done = True
        elif t <= 0.0:
            pos = active.start.copy()
        else:
            pos = quat.slerp(active.start, active.end, t, shortest=False)

        reached = int(np.floor(t * self.steps + 1e-9))
        return Rotation(pos=pos, path=active.points[:reached])

    def reset(self) -> None:
        """Back to the identity orientation; drops any path in progress."""
        self._current = quat.IDENTITY.copy()
        self._active = None

    def __repr__(self) -> str:
        x, y, z = self.current_position
        return f"Rotations(steps={self.steps}, position=({x:.3f}, {y:.3f}, {z:.3f}))"
