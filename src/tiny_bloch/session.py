"""
One Bloch sphere view.

A ``BlochSession`` owns everything a single view needs: the qubit
state, the rotation engine, the animation queue, the applied-gate
history and the equation history. Sessions share nothing, so several
views can live side by side.
"""

from __future__ import annotations

import logging
from typing import Callable, List, Optional

from .animation import AnimationQueue, Clock, Frame, FrameScheduler
from .config import DEFAULT_CONFIG, AnimationConfig
from .gates import Gate, UnknownGateError
from .rotations import Rotations
from .state import KET0, QubitState, equation_latex

logger = logging.getLogger(__name__)


class BlochSession:
    """
    Qubit state plus its animated Bloch sphere orientation.

    Parameters
    ----------
    clock, on_frame, request_frame :
        Forwarded to the ``AnimationQueue``.
    on_diagnostic : callable, optional
        Receives a message for every rejected request.
    config : AnimationConfig, optional

    Example
    -------
    >>> session = BlochSession()
    >>> session.apply("H")
    True
    >>> session.state
    QubitState(0.7071, 0.7071)
    """

    def __init__(
        self,
        clock: Optional[Clock] = None,
        on_frame: Optional[Callable[[Frame], None]] = None,
        request_frame: Optional[FrameScheduler] = None,
        on_diagnostic: Optional[Callable[[str], None]] = None,
        config: AnimationConfig = DEFAULT_CONFIG,
    ) -> None:
        self.config = config
        self.rotations = Rotations(config=config)
        self.queue = AnimationQueue(
            self.rotations,
            clock=clock,
            on_frame=on_frame,
            request_frame=request_frame,
            config=config,
        )
        self._on_diagnostic = on_diagnostic
        self._state = KET0
        self._history: List[Gate] = []
        self._equations: List[str] = []
        self.diagnostics: List[str] = []

    # -- Queries ------------------------------------------------------------

    @property
    def state(self) -> QubitState:
        return self._state

    @property
    def history(self) -> List[str]:
        """Names of the applied gates, oldest first."""
        return [g.value for g in self._history]

    @property
    def equations(self) -> List[str]:
        """One LaTeX equation per applied gate."""
        return list(self._equations)

    @property
    def is_animating(self) -> bool:
        return self.queue.is_running

    # -- Commands -----------------------------------------------------------

    def apply(self, name) -> bool:
        """
        Apply the named gate.

        Returns False, and records one diagnostic, if the name is not a
        supported gate. State, queue and trail are then left untouched.
        """
        try:
            gate = Gate.parse(name)
        except UnknownGateError as e:
            self._diagnose(str(e))
            return False

        before = self._state
        after = before.apply(gate)
        self.queue.queue_gate(self.rotations.applied(gate))
        self._state = after
        self._history.append(gate)
        self._equations.append(equation_latex(gate, before, after))
        return True

    def tick(self) -> Optional[Frame]:
        """Advance the animation by one frame."""
        return self.queue.tick()

    def reset(self) -> None:
        """Back to |0⟩ with empty history, trail and queue."""
        self._state = KET0
        self._history.clear()
        self._equations.clear()
        self.queue.reset()

    def snapshot(self) -> dict:
        """JSON-ready view of the session."""
        a, b = self._state.amplitudes
        x, y, z = self._state.bloch_vector()
        theta, phi = self._state.bloch_angles()
        return {
            "state": {
                "a": [a.re, a.im],
                "b": [b.re, b.im],
                "text": [str(a), str(b)],
                "latex": self._state.to_latex(),
            },
            "bloch": {"x": x, "y": y, "z": z, "theta": theta, "phi": phi},
            "history": self.history,
            "equations": self.equations,
            "queue": {
                "state": self.queue.state.value,
                "pending": len(self.queue),
                "trail": len(self.queue.trail),
            },
        }

    # -- Internals ----------------------------------------------------------

    def _diagnose(self, message: str) -> None:
        logger.warning(message)
        self.diagnostics.append(message)
        if self._on_diagnostic is not None:
            self._on_diagnostic(message)

    def __repr__(self) -> str:
        return f"BlochSession(state={self._state!r}, history={self.history})"
