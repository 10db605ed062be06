"""
  Tests of frame rendering, overlay compositing and image saving
"""

import os
import tempfile
import unittest

import numpy as np
import pygame

from julia_renderer.compute import MARKER_COLOR, MARKER_RADIUS, RING_COLOR, RING_RADIUS
from julia_renderer.options import FillStyle, InvalidRenderOptions, RenderOptions
from julia_renderer.renderer import (
    fill_color,
    render_iterations,
    render_julia,
    render_overlay,
    save_image,
)


COLOR = (12, 5, 10)


class TestRenderJulia(unittest.TestCase):

    def test_raster_shape_and_type(self):
        options = RenderOptions(width=40, height=30, max_iterations=20)
        image = render_julia(options, COLOR)
        assert image.shape == (30, 40, 3)
        assert image.dtype == np.uint8

    def test_small_grid_black_fill_is_all_black(self):
        options = RenderOptions(width=4, height=4, unit_width=4.0, max_iterations=1,
                                cx=0.0, cy=0.0, fill_style=FillStyle.BLACK)
        image = render_julia(options, COLOR)
        assert np.all(image == 0)

    def test_small_grid_bright_fill(self):
        options = RenderOptions(width=4, height=4, unit_width=4.0, max_iterations=1,
                                cx=0.0, cy=0.0, fill_style=FillStyle.BRIGHT)
        image = render_julia(options, COLOR)

        # First row and column start at |z| >= 2 and escape with 0 iterations
        assert np.all(image[0, :] == 0)
        assert np.all(image[:, 0] == 0)
        # Everything else survives the single iteration
        assert np.all(image[1:, 1:] == np.array(COLOR, dtype=np.uint8))

    def test_rendering_is_deterministic(self):
        options = RenderOptions(width=96, height=64, max_iterations=200, cx=-0.8, cy=0.156)
        first = render_julia(options, COLOR)
        second = render_julia(options, COLOR)
        assert first.tobytes() == second.tobytes()

    def test_reference_view_center(self):
        options = RenderOptions(width=512, height=512, unit_width=4.0, max_iterations=512,
                                cx=-0.981, cy=-0.277, fill_style=FillStyle.BRIGHT)
        data = render_iterations(options)
        assert data[256, 256] == 61

        image = render_julia(options, COLOR)
        assert tuple(image[256, 256]) == (255, 255, 255)

    def test_fill_styles_only_differ_inside_the_set(self):
        bright = RenderOptions(width=64, height=48, max_iterations=64, cx=-0.1, cy=0.1)
        black = RenderOptions(width=64, height=48, max_iterations=64, cx=-0.1, cy=0.1,
                              fill_style=FillStyle.BLACK)
        inside = render_iterations(bright) == bright.max_iterations
        assert inside.any()
        assert (~inside).any()

        bright_image = render_julia(bright, COLOR)
        black_image = render_julia(black, COLOR)

        assert np.all(black_image[inside] == 0)
        expected = fill_color(FillStyle.BRIGHT, 64, COLOR)
        assert np.all(bright_image[inside] == expected)
        assert np.array_equal(bright_image[~inside], black_image[~inside])

    def test_escaping_pixels_follow_iteration_ramp(self):
        options = RenderOptions(width=32, height=32, max_iterations=30, cx=0.3, cy=0.5)
        data = render_iterations(options)
        image = render_julia(options, (3, 2, 1))
        for py, px in [(0, 0), (5, 7), (16, 16), (31, 2)]:
            i = int(data[py, px])
            if i < options.max_iterations:
                expected = (min(i * 3, 255), min(i * 2, 255), min(i, 255))
                assert tuple(int(v) for v in image[py, px]) == expected

    def test_invalid_options_are_rejected(self):
        for options in [RenderOptions(width=0), RenderOptions(height=-4),
                        RenderOptions(unit_width=0.0), RenderOptions(max_iterations=0)]:
            with self.assertRaises(InvalidRenderOptions):
                render_julia(options, COLOR)

    def test_invalid_color_is_rejected(self):
        with self.assertRaises(InvalidRenderOptions):
            render_julia(RenderOptions(width=8, height=8), (12, 5))
        with self.assertRaises(InvalidRenderOptions):
            render_julia(RenderOptions(width=8, height=8), (12, 5, 300))


class TestFillColor(unittest.TestCase):

    def test_black(self):
        assert tuple(fill_color(FillStyle.BLACK, 100, COLOR)) == (0, 0, 0)

    def test_bright_uses_iteration_cap(self):
        assert tuple(fill_color(FillStyle.BRIGHT, 10, COLOR)) == (120, 50, 100)
        assert tuple(fill_color(FillStyle.BRIGHT, 512, (1, 0, 0))) == (255, 0, 0)


class TestRenderOverlay(unittest.TestCase):

    def setUp(self):
        self.options = RenderOptions(width=200, height=200, unit_width=1.0,
                                     max_iterations=32, cx=0.25, cy=-0.25)

    def _distances(self):
        options = self.options
        xs = (np.arange(options.width) - options.width / 2.0) / options.scale
        ys = (np.arange(options.height) - options.height / 2.0) / options.scale
        sx, sy = np.meshgrid(xs, ys)
        return np.sqrt((sx - options.cx) ** 2 + (sy - options.cy) ** 2)

    def test_marker_is_centered_on_constant(self):
        image = render_julia(self.options, COLOR)
        result = render_overlay(image, self.options)
        assert result is image
        # c = 0.25 - 0.25i at 200 pixels per unit
        assert tuple(image[50, 150]) == MARKER_COLOR

    def test_only_pixels_near_constant_change(self):
        original = render_julia(self.options, COLOR)
        image = render_overlay(original.copy(), self.options)
        dist = self._distances()

        outside = dist >= RING_RADIUS + 1e-9
        assert np.array_equal(image[outside], original[outside])

        marker = dist < MARKER_RADIUS - 1e-9
        assert marker.any()
        assert np.all(image[marker] == np.array(MARKER_COLOR, dtype=np.uint8))

        ring = (dist >= MARKER_RADIUS + 1e-9) & (dist < RING_RADIUS - 1e-9)
        assert ring.any()
        assert np.all(image[ring] == np.array(RING_COLOR, dtype=np.uint8))

    def test_constant_off_screen_changes_nothing(self):
        options = RenderOptions(width=50, height=50, unit_width=1.0, cx=1.5, cy=1.5)
        original = render_julia(options, COLOR)
        image = render_overlay(original.copy(), options)
        assert np.array_equal(image, original)

    def test_shape_mismatch_is_rejected(self):
        image = np.zeros((10, 20, 3), dtype=np.uint8)
        with self.assertRaises(InvalidRenderOptions):
            render_overlay(image, RenderOptions(width=10, height=20))


class TestSaveImage(unittest.TestCase):

    def test_png_round_trip(self):
        options = RenderOptions(width=24, height=16, max_iterations=50)
        image = render_julia(options, COLOR)
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "julia.png")
            save_image(image, path)
            loaded = pygame.surfarray.array3d(pygame.image.load(path))

        # surfarray is indexed (x, y)
        assert loaded.shape == (24, 16, 3)
        assert np.array_equal(loaded.swapaxes(0, 1), image)


if __name__ == '__main__':
    unittest.main()
