"""Animation settings shared by the rotation engine, the queue and the dashboard."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class AnimationConfig:
    """
    Timing, path resolution and trail colors.

    Attributes
    ----------
    rotation_ms : float
        Duration of one gate animation in milliseconds.
    path_steps : int
        Number of trail keyframes laid down per gate.
    trail_hue : float
        HSL hue of trail markers, in [0, 1].
    trail_lightness : float
        HSL lightness of trail markers, in [0, 1].
    trail_base_scale : float
        Marker scale added to the fade weight.
    """
    rotation_ms: float = 750.0
    path_steps: int = 64
    trail_hue: float = 0.6
    trail_lightness: float = 0.5
    trail_base_scale: float = 0.5

    def __post_init__(self) -> None:
        if self.rotation_ms <= 0:
            raise ValueError(f"rotation_ms must be positive, got {self.rotation_ms}")
        if self.path_steps < 1:
            raise ValueError(f"path_steps must be at least 1, got {self.path_steps}")
        for name in ("trail_hue", "trail_lightness"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must be in [0, 1], got {value}")


DEFAULT_CONFIG = AnimationConfig()
