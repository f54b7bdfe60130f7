"""
Frame-driven gate animation queue.

``AnimationQueue`` is a small state machine (Idle / Running) that plays
queued gates one at a time. Each call to ``tick`` is one rendering
frame: it reads the injected clock, eases the elapsed fraction of the
gate's duration, asks the rotation engine for the orientation and
publishes a ``Frame`` to the renderer.

The host supplies two hooks:

- ``clock()`` returning the current time in milliseconds;
- ``request_frame(callback)`` scheduling ``callback`` for the next
  frame (e.g. a GUI timer). Without it the host calls ``tick`` itself
  while ``is_running`` is true.

Markers are identified by integer handles; the renderer owns the
objects behind them.
"""

from __future__ import annotations

import logging
import math
import time
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Deque, List, Optional, Tuple

import numpy as np

from .config import DEFAULT_CONFIG, AnimationConfig
from .rotations import AppliedGate, Rotations

logger = logging.getLogger(__name__)

Clock = Callable[[], float]
FrameCallback = Callable[[], object]
FrameScheduler = Callable[[FrameCallback], object]


# ---------------------------------------------------------------------------
# Easing and color helpers
# ---------------------------------------------------------------------------

def ease_in_out_sine(x: float) -> float:
    """See https://easings.net/#easeInOutSine"""
    return -(math.cos(math.pi * x) - 1) / 2


def ease_out_sine(x: float) -> float:
    return math.sin((x * math.pi) / 2)


def _hue_to_rgb(p: float, q: float, t: float) -> float:
    if t < 0:
        t += 1
    if t > 1:
        t -= 1
    if t < 1 / 6:
        return p + (q - p) * 6 * t
    if t < 1 / 2:
        return q
    if t < 2 / 3:
        return p + (q - p) * (2 / 3 - t) * 6
    return p


def hsl_to_rgb(h: float, s: float, l: float) -> int:
    """HSL (each in [0, 1]) to a packed 0xRRGGBB integer."""
    if s == 0:
        r = g = b = l  # achromatic
    else:
        q = l * (1 + s) if l < 0.5 else l + s - l * s
        p = 2 * l - q
        r = _hue_to_rgb(p, q, h + 1 / 3)
        g = _hue_to_rgb(p, q, h)
        b = _hue_to_rgb(p, q, h - 1 / 3)

    def channel(v: float) -> int:
        return min(int(v * 255), 255)

    return (channel(r) << 16) | (channel(g) << 8) | channel(b)


def monotonic_ms() -> float:
    """Default clock: monotonic time in milliseconds."""
    return time.perf_counter() * 1000.0


# ---------------------------------------------------------------------------
# Published data
# ---------------------------------------------------------------------------

class QueueState(Enum):
    IDLE = "idle"
    RUNNING = "running"


@dataclass(frozen=True)
class TrailPoint:
    """A trail marker as the renderer should draw it this frame."""
    handle: int
    position: Tuple[float, float, float]
    color: int
    weight: float
    scale: float


@dataclass(frozen=True, eq=False)
class Frame:
    """One animation step published to the renderer."""
    orientation: np.ndarray
    position: Tuple[float, float, float]
    trail: Tuple[TrailPoint, ...]
    new_markers: Tuple[int, ...]
    gate: str
    progress: float
    complete: bool

    def to_dict(self) -> dict:
        return {
            "orientation": [float(v) for v in self.orientation],
            "position": list(self.position),
            "trail": [
                {"handle": p.handle, "position": list(p.position),
                 "color": p.color, "weight": p.weight, "scale": p.scale}
                for p in self.trail
            ],
            "new_markers": list(self.new_markers),
            "gate": self.gate,
            "progress": self.progress,
            "complete": self.complete,
        }


@dataclass
class _TrailEntry:
    handle: int
    position: Tuple[float, float, float]


# ---------------------------------------------------------------------------
# Queue
# ---------------------------------------------------------------------------

class AnimationQueue:
    """
    Single-consumer FIFO of applied gates, advanced once per frame.

    Parameters
    ----------
    rotations : Rotations
        Engine that produces the orientation for each gate.
    clock : callable, optional
        Returns the current time in milliseconds.
    on_frame : callable, optional
        Receives every published ``Frame``.
    request_frame : callable, optional
        Schedules a callback for the next frame.
    config : AnimationConfig, optional
    """

    def __init__(
        self,
        rotations: Rotations,
        clock: Optional[Clock] = None,
        on_frame: Optional[Callable[[Frame], None]] = None,
        request_frame: Optional[FrameScheduler] = None,
        config: AnimationConfig = DEFAULT_CONFIG,
    ) -> None:
        self.rotations = rotations
        self.config = config
        self._clock = clock or monotonic_ms
        self._on_frame = on_frame
        self._request_frame = request_frame

        self._state = QueueState.IDLE
        self._pending: Deque[AppliedGate] = deque()
        self._active: Optional[AppliedGate] = None
        self._start_time = 0.0
        self._trail: List[_TrailEntry] = []
        self._next_handle = 0
        self._completed: List[AppliedGate] = []
        self._frame_requested = False
        self._in_tick = False

    # -- Properties ---------------------------------------------------------

    @property
    def state(self) -> QueueState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._state is QueueState.RUNNING

    @property
    def pending(self) -> List[AppliedGate]:
        """Gates waiting behind the active one, in play order."""
        return list(self._pending)

    @property
    def active(self) -> Optional[AppliedGate]:
        return self._active

    @property
    def completed(self) -> List[AppliedGate]:
        """Gates that reached t = 1, oldest first."""
        return list(self._completed)

    @property
    def trail(self) -> List[Tuple[float, float, float]]:
        return [entry.position for entry in self._trail]

    def __len__(self) -> int:
        return len(self._pending) + (1 if self._active is not None else 0)

    # -- Control ------------------------------------------------------------

    def queue_gate(self, gate: AppliedGate) -> None:
        """Append ``gate``; starts the frame loop when idle."""
        self._pending.append(gate)
        if self._state is QueueState.RUNNING:
            return
        self._state = QueueState.RUNNING
        logger.debug("Animation queue running (%s queued)", gate.name)
        self._schedule()

    def reset(self) -> None:
        """
        Drop all pending and in-flight work, clear the trail and reset the
        rotation engine. A frame already scheduled will find the queue
        empty and go idle.
        """
        self._pending.clear()
        self._active = None
        self._trail.clear()
        self._completed.clear()
        self.rotations.reset()
        if not self._frame_requested:
            self._state = QueueState.IDLE

    def tick(self) -> Optional[Frame]:
        """
        Advance one frame.

        Returns the published frame, or None when there was nothing to
        animate (the queue is then idle).
        """
        if self._in_tick:
            logger.debug("Ignoring reentrant tick")
            return None
        self._frame_requested = False
        if self._state is QueueState.IDLE:
            return None

        self._in_tick = True
        try:
            frame = self._advance()
        finally:
            self._in_tick = False

        if self._state is QueueState.RUNNING:
            self._schedule()
        return frame

    # -- Internals ----------------------------------------------------------

    def _schedule(self) -> None:
        if self._request_frame is None or self._frame_requested:
            return
        self._frame_requested = True
        self._request_frame(self.tick)

    def _go_idle(self) -> None:
        self._state = QueueState.IDLE
        logger.debug("Animation queue idle")

    def _advance(self) -> Optional[Frame]:
        if self._active is None:
            if not self._pending:
                self._go_idle()
                return None
            self._active = self._pending.popleft()
            self._start_time = self._clock()

        gate = self._active
        x = (self._clock() - self._start_time) / self.config.rotation_ms
        t = ease_in_out_sine(x) if x < 1 else 1.0

        rotation = self.rotations.get_rotation_at_percent(gate, t)

        new_markers = []
        for point in rotation.path:
            if point.ref is not None:
                continue
            point.ref = self._next_handle
            self._next_handle += 1
            pos = tuple(float(v) for v in point.position)
            self._trail.append(_TrailEntry(point.ref, pos))
            new_markers.append(point.ref)

        complete = t >= 1
        if complete:
            self._completed.append(gate)
            self._active = None
            if not self._pending:
                self._go_idle()

        frame = Frame(
            orientation=rotation.pos,
            position=tuple(float(v) for v in rotation.position),
            trail=self._faded_trail(),
            new_markers=tuple(new_markers),
            gate=gate.name,
            progress=t,
            complete=complete,
        )
        if self._on_frame is not None:
            self._on_frame(frame)
        return frame

    def _faded_trail(self) -> Tuple[TrailPoint, ...]:
        n = len(self._trail)
        points = []
        for idx, entry in enumerate(self._trail):
            weight = ease_out_sine((idx + 1) / n)
            color = hsl_to_rgb(self.config.trail_hue, weight,
                               self.config.trail_lightness)
            points.append(TrailPoint(
                handle=entry.handle,
                position=entry.position,
                color=color,
                weight=weight,
                scale=weight + self.config.trail_base_scale,
            ))
        return tuple(points)

    def __repr__(self) -> str:
        return (f"AnimationQueue(state={self._state.value}, "
                f"pending={len(self._pending)}, trail={len(self._trail)})")
