"""
tiny-bloch: single-qubit Bloch sphere state and gate animation.

Features:
- Complex 2-vector qubit state and the X, Y, Z, S, T, H gates
- Rotation path engine: each gate as a slerped quaternion path
- Frame-driven animation queue with easing and a fading trail
- Per-view sessions with gate and equation history
- ASCII Bloch sphere view and an optional Flask JSON API

Quick Start:
    >>> from tiny_bloch import BlochSession
    >>> session = BlochSession()
    >>> session.apply("H")
    True
    >>> session.state.bloch_vector()  # (1.0, 0.0, 0.0) up to rounding
"""
__version__ = "1.0.0"

from .cplx import Complex, format_complex
from .gates import Gate, UnknownGateError
from .state import KET0, KET1, QubitState, mul_vec2
from .rotations import AppliedGate, PathPoint, Rotation, Rotations
from .animation import AnimationQueue, Frame, QueueState, TrailPoint
from .config import AnimationConfig
from .session import BlochSession
from .visualization import show_bloch, show_state

from . import gates

__all__ = [
    # Algebra
    'Complex',
    'format_complex',
    # State and gates
    'Gate',
    'UnknownGateError',
    'QubitState',
    'KET0',
    'KET1',
    'mul_vec2',
    'gates',
    # Animation
    'AppliedGate',
    'PathPoint',
    'Rotation',
    'Rotations',
    'AnimationQueue',
    'Frame',
    'QueueState',
    'TrailPoint',
    'AnimationConfig',
    # Session
    'BlochSession',
    # Visualization
    'show_bloch',
    'show_state',
]
