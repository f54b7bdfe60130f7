"""
Terminal views of a qubit state.

- Amplitude / probability bars
- ASCII Bloch sphere projection onto the x-y plane
"""
from typing import Iterable, List, Sequence, Tuple

import numpy as np

from .cplx import format_complex
from .state import QubitState


class StateVisualizer:
    """Text rendering of the two amplitudes."""

    @staticmethod
    def amplitudes_ascii(state: QubitState) -> str:
        lines = []
        lines.append("State Vector:")
        lines.append("─" * 50)

        for label, amp in (("0", state.a), ("1", state.b)):
            prob = abs(amp) ** 2
            phase = np.angle(amp) if abs(amp) > 1e-10 else 0.0
            bar = '█' * int(prob * 40)

            if abs(phase) < 0.01:
                phase_str = ''
            elif abs(phase - np.pi) < 0.01:
                phase_str = ' (π)'
            else:
                phase_str = f' ({phase:.2f})'

            lines.append(f"|{label}⟩: {bar:40s} {format_complex(amp):>16s}{phase_str} ({prob*100:.1f}%)")

        return '\n'.join(lines)


class BlochSphere:
    """
    Top-down ASCII view of the Bloch sphere.

    Points are projected onto the x-y plane as seen from +z; the marker
    glyph tells which hemisphere the state is in. Trail positions from
    an ``AnimationQueue`` can be drawn underneath the marker.
    """

    DEFAULT_SIZE = 11
    TRAIL = '*'
    LEGEND = (
        ('●', "above equator (z>0)"),
        ('○', "below equator (z<0)"),
        ('◐', "near equator"),
    )

    @staticmethod
    def cell(x: float, y: float, size: int) -> Tuple[int, int]:
        """Grid (row, col) of the point (x, y), clamped to the grid."""
        center = size // 2
        col = int(round(center + center * x))
        row = int(round(center - center * y))
        return (min(max(row, 0), size - 1), min(max(col, 0), size - 1))

    @staticmethod
    def marker(z: float) -> str:
        if z > 0.3:
            return '●'
        if z < -0.3:
            return '○'
        return '◐'

    @classmethod
    def blank(cls, size: int) -> List[List[str]]:
        """Axes and equator outline."""
        center = size // 2
        rows = [[' '] * size for _ in range(size)]
        for i in range(size):
            rows[center][i] = '─'
            rows[i][center] = '│'
        rows[center][center] = '┼'
        for angle in np.linspace(0, 2 * np.pi, 8 * size, endpoint=False):
            row, col = cls.cell(np.cos(angle), np.sin(angle), size)
            rows[row][col] = '·'
        return rows

    @classmethod
    def ascii_bloch(cls, state: QubitState,
                    trail: Iterable[Sequence[float]] = (),
                    size: int = DEFAULT_SIZE) -> str:
        """
        Render ``state`` on a ``size`` x ``size`` grid.

        Parameters
        ----------
        state : QubitState
        trail : iterable of (x, y, z), optional
            Earlier marker positions, e.g. ``AnimationQueue.trail``.
        size : int
            Odd grid width, at least 5.
        """
        if size < 5 or size % 2 == 0:
            raise ValueError(f"size must be an odd number >= 5, got {size}")

        x, y, z = state.bloch_vector()
        theta, phi = state.bloch_angles()
        rows = cls.blank(size)

        trail = list(trail)
        for px, py, _ in trail:
            row, col = cls.cell(px, py, size)
            rows[row][col] = cls.TRAIL

        row, col = cls.cell(x, y, size)
        rows[row][col] = cls.marker(z)

        pad = ' ' * 4
        lines = [
            "Bloch Sphere:",
            "─" * 40,
            f"  Coordinates: x={x:.3f}, y={y:.3f}, z={z:.3f}",
            f"  Angles: θ={theta:.3f} rad, φ={phi:.3f} rad",
            "",
            pad + ' ' * (size // 2) + "+y",
        ]
        lines.extend(pad + ''.join(r) for r in rows)
        lines.append("  -x" + ' ' * size + "+x")
        lines.append(pad + ' ' * (size // 2) + "-y")
        lines.append("")
        for glyph, meaning in cls.LEGEND:
            lines.append(f"  {glyph} = {meaning}")
        if trail:
            lines.append(f"  {cls.TRAIL} = trail ({len(trail)} points)")
        return '\n'.join(lines)


def show_state(state: QubitState) -> str:
    """Show the amplitudes as an ASCII bar chart."""
    return StateVisualizer.amplitudes_ascii(state)


def show_bloch(state: QubitState, trail: Iterable[Sequence[float]] = (),
               size: int = BlochSphere.DEFAULT_SIZE) -> str:
    """Show the state on an ASCII Bloch sphere, optionally with its trail."""
    return BlochSphere.ascii_bloch(state, trail, size)
