"""
Main application module for the Julia set viewer.

Contains the JuliaApp class which handles:
- Window setup and main loop
- Keyboard input (constant, zoom, iterations, fill style, color)
- Live preview rendering and display
- Handing exports to the background ExportWorker
"""

import os
from dataclasses import replace

import pygame

from .colormaps import COLORS, next_color_name, normalize_color
from .compute import warmup_jit
from .export import ExportWorker
from .options import FillStyle, RenderOptions
from .renderer import render_julia, render_overlay
from .settings import load_settings, save_settings


# Preview resolution limits, per side in pixels
MIN_RESOLUTION = 128
MAX_RESOLUTION = 16384


def scaled_resolution(options, factor):
    """
    Scale the preview resolution, keeping each side within
    MIN_RESOLUTION..MAX_RESOLUTION.

    Returns:
        dict with the new width and height, for replace()
    """
    def clamp(size):
        return max(MIN_RESOLUTION, min(MAX_RESOLUTION, int(round(size * factor))))

    return {"width": clamp(options.width), "height": clamp(options.height)}


class JuliaApp:
    """
    Main application class for the Julia set viewer.

    Handles the pygame window, event loop, and coordinates between
    the preview renderer, the export worker, and the display.
    """

    # Step sizes for keyboard adjustments
    C_STEP = 0.01
    C_STEP_FINE = 0.001
    ZOOM_IN_FACTOR = 0.85
    ZOOM_OUT_FACTOR = 1.18
    ITER_STEP = 16
    MIN_ITER = 5
    MAX_PREVIEW_ITER = 4096
    RESOLUTION_STEP = 2

    def __init__(self, settings_path=None):
        """
        Initialize the application.

        Args:
            settings_path: JSON file to load and save settings
                (default: settings.json next to the package)
        """
        self.settings_path = settings_path
        if settings_path is None:
            self.settings = load_settings()
        else:
            self.settings = load_settings(settings_path)
        self.color_name = self._color_name_for(self.settings.color)

        # Pygame state (initialized in run())
        self.screen = None
        self.clock = None
        self.current_surface = None

        self.worker = None
        self.settings_changed = True
        self.preview_render_ms = 0.0
        self.export_render_ms = None
        self.status = ""

        self.running = False

    def run(self):
        """Run the application main loop."""
        self._init_pygame()
        warmup_jit(normalize_color(self.settings.color))
        self.worker = ExportWorker()

        self.running = True
        try:
            while self.running:
                self._handle_events()
                self._check_export_result()
                if self.settings_changed:
                    self._update_preview()
                    self.settings_changed = False
                self._draw()
                self.clock.tick(60)
        finally:
            self._shutdown()

    def _init_pygame(self):
        """Initialize pygame and create window."""
        pygame.init()
        options = self.settings.options
        self.screen = pygame.display.set_mode((options.width, options.height))
        self.clock = pygame.time.Clock()

    def _shutdown(self):
        """Wait for queued exports, persist settings, close the window."""
        if self.worker is not None:
            pygame.display.set_caption("Finishing exports...")
            self.worker.shutdown()
            self._check_export_result()
        try:
            if self.settings_path is None:
                save_settings(self.settings)
            else:
                save_settings(self.settings, self.settings_path)
        except OSError as e:
            print(f"Warning: Could not save settings: {e}")
        pygame.quit()

    def _color_name_for(self, color):
        for name, preset in COLORS.items():
            if tuple(preset) == tuple(color):
                return name
        return None

    def _set_options(self, **changes):
        options = replace(self.settings.options, **changes)
        self.settings = replace(self.settings, options=options)
        self.settings_changed = True

    def _handle_events(self):
        """Process all pending pygame events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
            elif event.type == pygame.KEYDOWN:
                self._handle_key(event)

    def _handle_key(self, event):
        """Handle keyboard input."""
        options = self.settings.options
        fine = pygame.key.get_mods() & pygame.KMOD_SHIFT
        step = self.C_STEP_FINE if fine else self.C_STEP

        if event.key == pygame.K_LEFT:
            self._set_options(cx=options.cx - step)
        elif event.key == pygame.K_RIGHT:
            self._set_options(cx=options.cx + step)
        elif event.key == pygame.K_UP:
            self._set_options(cy=options.cy - step)
        elif event.key == pygame.K_DOWN:
            self._set_options(cy=options.cy + step)
        elif event.key in (pygame.K_PLUS, pygame.K_EQUALS, pygame.K_KP_PLUS):
            self._set_options(unit_width=options.unit_width * self.ZOOM_IN_FACTOR)
        elif event.key in (pygame.K_MINUS, pygame.K_KP_MINUS):
            self._set_options(unit_width=options.unit_width * self.ZOOM_OUT_FACTOR)
        elif event.key == pygame.K_RIGHTBRACKET:
            self._set_options(max_iterations=min(options.max_iterations + self.ITER_STEP,
                                                 self.MAX_PREVIEW_ITER))
        elif event.key == pygame.K_LEFTBRACKET:
            self._set_options(max_iterations=max(options.max_iterations - self.ITER_STEP,
                                                 self.MIN_ITER))
        elif event.key == pygame.K_PERIOD:
            self._set_options(**scaled_resolution(options, self.RESOLUTION_STEP))
        elif event.key == pygame.K_COMMA:
            self._set_options(**scaled_resolution(options, 1.0 / self.RESOLUTION_STEP))
        elif event.key == pygame.K_f:
            fill = FillStyle.BLACK if options.fill_style == FillStyle.BRIGHT else FillStyle.BRIGHT
            self._set_options(fill_style=fill)
        elif event.key == pygame.K_c:
            self.color_name = next_color_name(self.color_name)
            self.settings = replace(self.settings, color=COLORS[self.color_name])
            self.settings_changed = True
        elif event.key == pygame.K_o:
            self.settings = replace(self.settings, show_overlay=not self.settings.show_overlay)
            self.settings_changed = True
        elif event.key == pygame.K_e:
            self._export()
        elif event.key == pygame.K_r:
            self.settings = replace(self.settings, options=replace(
                RenderOptions(), width=options.width, height=options.height))
            self.settings_changed = True
        elif event.key == pygame.K_ESCAPE:
            self.running = False

    def _update_preview(self):
        """Render the preview synchronously and rebuild the display surface."""
        options = self.settings.options
        if self.screen.get_size() != (options.width, options.height):
            self.screen = pygame.display.set_mode((options.width, options.height))
        start_ticks = pygame.time.get_ticks()
        image = render_julia(options, self.settings.color)
        if self.settings.show_overlay:
            render_overlay(image, options)
        self.preview_render_ms = float(pygame.time.get_ticks() - start_ticks)
        self.current_surface = pygame.surfarray.make_surface(image.swapaxes(0, 1))
        self._update_caption()

    def _export(self):
        """Queue a high-resolution render of the current view."""
        export_options = self.settings.export_options()
        path = os.path.abspath(self.settings.export_name)
        self.worker.submit_job(path, export_options, self.settings.color)
        self.status = f"exporting {export_options.width}x{export_options.height}..."
        self._update_caption()

    def _check_export_result(self):
        """Collect finished exports without blocking."""
        result = self.worker.poll_result()
        while result is not None:
            self.export_render_ms = result.elapsed_ms
            if result.ok:
                self.status = f"saved {os.path.basename(result.path)}"
                print(f"Render saved to: {result.path} ({result.elapsed_ms:.2f}ms)")
            else:
                self.status = "export failed"
            result = self.worker.poll_result()
            self._update_caption()

    def _update_caption(self):
        options = self.settings.options
        parts = [
            f"c = {options.cx:.3f}{options.cy:+.3f}i",
            f"preview {self.preview_render_ms:.0f}ms",
        ]
        if self.export_render_ms is not None:
            parts.append(f"export {self.export_render_ms:.0f}ms")
        if self.worker is not None and self.worker.pending:
            parts.append(f"{self.worker.pending} queued")
        if self.status:
            parts.append(self.status)
        pygame.display.set_caption("Julia Set - " + " | ".join(parts))

    def _draw(self):
        """Draw the current frame."""
        self.screen.fill((0, 0, 0))
        if self.current_surface is not None:
            self.screen.blit(self.current_surface, (0, 0))
        pygame.display.flip()


def run(settings_path=None):
    """
    Run the Julia set viewer.

    Args:
        settings_path: JSON settings file (default: settings.json next to the package)
    """
    app = JuliaApp(settings_path)
    try:
        app.run()
    except KeyboardInterrupt:
        pass
