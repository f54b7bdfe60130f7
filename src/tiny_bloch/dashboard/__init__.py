"""
tiny-bloch Dashboard.

Programmatically: from tiny_bloch.dashboard import launch; launch()
"""

from tiny_bloch.dashboard.server import create_app, launch

__all__ = ["create_app", "launch"]
