"""
Frame and overlay rendering for Julia sets.

render_julia() drives the JIT kernels in compute.py across a whole
image and returns a fresh RGB raster:

    options = RenderOptions(width=800, height=600, cx=-0.8, cy=0.156)
    image = render_julia(options, (12, 5, 10))
    render_overlay(image, options)   # optional marker at c
    save_image(image, "julia.png")

Rasters are numpy arrays of shape (height, width, 3) and dtype uint8,
row 0 at the top. The caller owns the returned array.
"""

import numpy as np
import pygame

from .colormaps import normalize_color
from .compute import (
    apply_color,
    color_iteration,
    compute_iterations,
    draw_marker,
)
from .options import FillStyle, InvalidRenderOptions


def fill_color(fill_style, max_iter, color):
    """
    Get the color for points that never escape.

    Bright fill uses the color of the iteration cap, so the interior of
    the set stands out from the fast-escaping background. Black fill
    leaves it black.

    Returns:
        uint8 array of 3 channel values
    """
    if fill_style == FillStyle.BLACK:
        return np.zeros(3, dtype=np.uint8)
    r, g, b = (int(c) for c in color)
    return np.array(color_iteration(int(max_iter), r, g, b), dtype=np.uint8)


def render_iterations(options):
    """Compute the raw iteration grid (height, width) for options."""
    options.validate()
    return compute_iterations(
        options.width, options.height, float(options.unit_width),
        options.max_iterations, float(options.cx), float(options.cy)
    )


def render_julia(options, color):
    """
    Render a full Julia set image.

    Args:
        options: RenderOptions for this render
        color: Triple of channel multipliers

    Returns:
        New RGB image array of shape (height, width, 3)

    Raises:
        InvalidRenderOptions if options or color are unusable
    """
    color = normalize_color(color)
    data = render_iterations(options)
    image = np.empty((options.height, options.width, 3), dtype=np.uint8)
    fill = fill_color(options.fill_style, options.max_iterations, color)
    apply_color(data, options.max_iterations, color, fill, image)
    return image


def render_overlay(image, options):
    """
    Mark the constant c on an image rendered with the same options.

    The image is modified in place and returned.
    """
    options.validate()
    if image.shape != (options.height, options.width, 3):
        raise InvalidRenderOptions(
            f"image shape {image.shape} does not match "
            f"{options.width}x{options.height} render"
        )
    draw_marker(image, float(options.unit_width), float(options.cx), float(options.cy))
    return image


def save_image(image, path):
    """
    Encode an RGB image to path. The format follows the file extension.

    Raises:
        pygame.error or OSError if the file cannot be written
    """
    surface = pygame.surfarray.make_surface(image.swapaxes(0, 1))
    pygame.image.save(surface, str(path))
