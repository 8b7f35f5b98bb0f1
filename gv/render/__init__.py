"""Frame rendering for the interactive viewer.

Builders here only read ``AppState``; ``render_frame`` is the single place
that writes to the terminal.
"""

from __future__ import annotations

from .frame import RenderContext, build_frame, build_frame_rows, render_frame
from .static import render_static_diff

__all__ = [
    "RenderContext",
    "build_frame",
    "build_frame_rows",
    "render_frame",
    "render_static_diff",
]
