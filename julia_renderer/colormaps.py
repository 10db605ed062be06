"""
Color presets for Julia set rendering.

A color is a triple of per-channel multipliers, not an RGB value: the
final channel is min(iterations, 255) * multiplier, saturating at 255.
Small multipliers give long, smooth ramps from black; large ones
saturate after a few iterations.

To add a new preset, add an entry to the COLORS dictionary below.
"""

import numpy as np

from .options import InvalidRenderOptions


DEFAULT_COLOR = (12, 5, 10)

# Registry of all available presets.
# Keys are display names, values are channel multipliers.
COLORS = {
    'Magenta': DEFAULT_COLOR,
    'Fire': (16, 6, 2),
    'Ocean': (2, 8, 14),
    'Forest': (4, 12, 3),
    'Grayscale': (8, 8, 8),
    'Gold': (14, 11, 2),
}


def normalize_color(color):
    """
    Validate a color triple and convert it to a uint8 array.

    Args:
        color: Sequence of three integers in 0..255

    Returns:
        numpy array of shape (3,) and dtype uint8

    Raises:
        InvalidRenderOptions if the triple is malformed
    """
    values = tuple(color)
    if len(values) != 3:
        raise InvalidRenderOptions(f"color must have 3 channels, got {len(values)}")
    for value in values:
        try:
            whole = int(value) == value
        except (TypeError, ValueError) as e:
            raise InvalidRenderOptions(f"color channel is not a number: {value!r}") from e
        if not whole or not 0 <= value <= 255:
            raise InvalidRenderOptions(f"color channel out of range 0..255: {value!r}")
    return np.array([int(v) for v in values], dtype=np.uint8)


def get_color(name):
    """
    Get a color preset by name.

    Raises:
        KeyError if name not found
    """
    return COLORS[name]


def get_default_color():
    """Get the default color preset (Magenta)."""
    return DEFAULT_COLOR


def list_color_names():
    """Get list of available preset names."""
    return list(COLORS.keys())


def next_color_name(name):
    """Get the preset after name, wrapping around. Unknown names start over."""
    names = list_color_names()
    if name not in names:
        return names[0]
    return names[(names.index(name) + 1) % len(names)]
