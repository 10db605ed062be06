"""
Julia set computation functions using Numba JIT compilation.

This module contains all the performance-critical computation functions
that are JIT-compiled for speed. These functions handle:
- Mapping pixel indices to points in the complex plane
- Escape-time iteration of z² + c for a fixed constant c
- Iteration-to-color mapping with saturating channel multipliers
- Marker overlay compositing for the constant c

The grid kernels run rows in parallel with prange. Every row is written
only by the iteration that owns it, so the output never depends on the
order in which rows finish.

fastmath is deliberately off: renders must be bit-reproducible.

The preview (UI thread) and the export worker launch parallel kernels
concurrently, so only a thread-safe threading layer (TBB or OpenMP) may
be used; the workqueue layer aborts the process in that case.
"""

import numpy as np
from numba import config, jit, prange


# Must be set before the first parallel kernel launches
config.THREADING_LAYER = 'threadsafe'


ESCAPE_RADIUS_SQ = 4.0

# Overlay marker geometry, in complex-plane units
MARKER_RADIUS = 0.03
RING_RADIUS = 0.04
MARKER_COLOR = (0, 120, 120)
RING_COLOR = (255, 255, 255)


@jit(nopython=True, cache=True)
def pixel_to_plane(x, y, width, height, unit_width):
    """
    Map a pixel index to a point in the complex plane.

    The view is centered on the image: pixel (width/2, height/2) maps
    to the origin. unit_width must be non-zero.

    Returns:
        (sx, sy): Real and imaginary parts of the plane point
    """
    scale = width / unit_width
    return (x - width / 2.0) / scale, (y - height / 2.0) / scale


@jit(nopython=True, cache=True)
def escape_time(x, y, cx, cy, max_iter):
    """
    Iterate z² + c from the starting point (x, y).

    Counts iterations while |z|² < 4, up to max_iter.

    Args:
        x, y: Starting point in the complex plane
        cx, cy: Real and imaginary parts of the constant c
        max_iter: Iteration cap

    Returns:
        (iteration, escaped): escaped is False when the cap was reached
    """
    zr, zi = np.float64(x), np.float64(y)
    iteration = 0
    while zr * zr + zi * zi < ESCAPE_RADIUS_SQ and iteration < max_iter:
        zr, zi = zr * zr - zi * zi + cx, 2.0 * zr * zi + cy
        iteration += 1
    return iteration, iteration < max_iter


@jit(nopython=True, cache=True)
def color_iteration(iteration, r, g, b):
    """Scale the color multipliers by the clamped iteration count, saturating at 255."""
    i = min(iteration, 255)
    return min(i * r, 255), min(i * g, 255), min(i * b, 255)


@jit(nopython=True, parallel=True, cache=True)
def compute_iterations(width, height, unit_width, max_iter, cx, cy):
    """
    Compute escape-time iteration counts for every pixel.

    Args:
        width, height: Output dimensions in pixels
        unit_width: Width of the viewport in complex-plane units
        max_iter: Iteration cap
        cx, cy: The Julia constant c

    Returns:
        2D int32 array of shape (height, width). Points that never
        escaped hold max_iter.
    """
    result = np.zeros((height, width), dtype=np.int32)

    for py in prange(height):
        for px in range(width):
            sx, sy = pixel_to_plane(px, py, width, height, unit_width)
            iteration, _ = escape_time(sx, sy, cx, cy, max_iter)
            result[py, px] = iteration

    return result


@jit(nopython=True, parallel=True, cache=True)
def apply_color(data, max_iter, color, fill, out):
    """
    Convert iteration counts to RGB.

    Args:
        data: 2D array of iteration counts from compute_iterations
        max_iter: Iteration cap used for data
        color: uint8 array of 3 channel multipliers
        fill: uint8 array of 3 channel values for points that never escaped
        out: Output RGB image array (modified in place)
    """
    height, width = data.shape
    r = np.int64(color[0])
    g = np.int64(color[1])
    b = np.int64(color[2])

    for py in prange(height):
        for px in range(width):
            val = data[py, px]
            if val >= max_iter:
                out[py, px, 0] = fill[0]
                out[py, px, 1] = fill[1]
                out[py, px, 2] = fill[2]
            else:
                cr, cg, cb = color_iteration(np.int64(val), r, g, b)
                out[py, px, 0] = np.uint8(cr)
                out[py, px, 1] = np.uint8(cg)
                out[py, px, 2] = np.uint8(cb)


@jit(nopython=True, parallel=True, cache=True)
def draw_marker(image, unit_width, cx, cy):
    """
    Draw a filled disc with a ring around the constant c.

    Pixels outside RING_RADIUS are left untouched.

    Args:
        image: RGB image array (height, width, 3), modified in place
        unit_width: Viewport width used to render image
        cx, cy: The Julia constant c
    """
    height, width = image.shape[:2]
    for py in prange(height):
        for px in range(width):
            sx, sy = pixel_to_plane(px, py, width, height, unit_width)
            dist = np.sqrt((sx - cx) * (sx - cx) + (sy - cy) * (sy - cy))
            if dist < MARKER_RADIUS:
                image[py, px, 0] = MARKER_COLOR[0]
                image[py, px, 1] = MARKER_COLOR[1]
                image[py, px, 2] = MARKER_COLOR[2]
            elif dist < RING_RADIUS:
                image[py, px, 0] = RING_COLOR[0]
                image[py, px, 1] = RING_COLOR[1]
                image[py, px, 2] = RING_COLOR[2]


def warmup_jit(color):
    """
    Warm up JIT compilation with small dummy arrays.

    Call this once at startup to pre-compile the Numba functions,
    avoiding a delay on first actual use.

    Args:
        color: A uint8 color array to use for warming up apply_color
    """
    data = compute_iterations(10, 10, 4.0, 10, 0.0, 0.0)
    dummy = np.zeros((10, 10, 3), dtype=np.uint8)
    apply_color(data, 10, color, np.zeros(3, dtype=np.uint8), dummy)
    draw_marker(dummy, 4.0, 0.0, 0.0)
