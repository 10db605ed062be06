"""
Julia Set Renderer Package

Renders quadratic Julia sets (z² + c) with Numba JIT-compiled,
row-parallel kernels, and exports high-resolution renders on a
background thread so the viewer stays responsive.

Quick Start:
    from julia_renderer import RenderOptions, render_julia, save_image
    image = render_julia(RenderOptions(cx=-0.8, cy=0.156), (12, 5, 10))
    save_image(image, "julia.png")

Or the interactive viewer from command line:
    python -m julia_renderer

Package Structure:
    - compute.py: JIT-compiled mapping, escape-time and coloring kernels
    - options.py: RenderOptions, FillStyle and validation
    - colormaps.py: Color multiplier presets
    - renderer.py: Frame and overlay rendering, image saving
    - export.py: Background export worker
    - settings.py: settings.json persistence
    - app.py: Pygame viewer and event loop

Controls:
    - Arrows: Move the constant c (Shift for fine steps)
    - +/-: Zoom in/out
    - [ / ]: Fewer/more preview iterations
    - , / .: Halve/double the preview resolution (128..16384 per side)
    - F: Toggle fill style (Bright/Black)
    - C: Cycle color preset
    - O: Toggle the marker at c
    - E: Export a high-resolution render
    - R: Reset to default view
    - ESC: Quit
"""

from .options import FillStyle, InvalidRenderOptions, RenderOptions
from .colormaps import COLORS, get_color, list_color_names
from .renderer import render_julia, render_overlay, save_image
from .export import ExportWorker, JobResult, RenderJob
from .settings import Settings, load_settings, save_settings

__version__ = "1.0.0"
__all__ = [
    "COLORS",
    "ExportWorker",
    "FillStyle",
    "InvalidRenderOptions",
    "JobResult",
    "RenderJob",
    "RenderOptions",
    "Settings",
    "get_color",
    "list_color_names",
    "load_settings",
    "render_julia",
    "render_overlay",
    "save_image",
    "save_settings",
]
