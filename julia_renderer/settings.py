"""
Persisted viewer settings.

The viewer keeps its state (preview options, color, export parameters)
in a settings.json file next to the package, so a session picks up
where the last one left off. Loading never fails: a missing or broken
file falls back to defaults with a warning.
"""

import json
import os
from dataclasses import dataclass, field, replace

from .colormaps import get_default_color, normalize_color
from .options import InvalidRenderOptions, RenderOptions


SETTINGS_PATH = os.path.join(os.path.dirname(__file__), 'settings.json')


@dataclass(frozen=True)
class Settings:
    """Everything the viewer needs to restore a session."""

    options: RenderOptions = field(default_factory=RenderOptions)
    color: tuple = get_default_color()
    export_multiplier: int = 8
    export_iterations: int = 512
    export_name: str = 'julia_set.png'
    show_overlay: bool = False

    def export_options(self):
        """Render options for an export of the current view."""
        return self.options.for_export(self.export_multiplier, self.export_iterations)

    def to_dict(self):
        return {
            'options': self.options.to_dict(),
            'color': list(self.color),
            'export_multiplier': self.export_multiplier,
            'export_iterations': self.export_iterations,
            'export_name': self.export_name,
            'show_overlay': self.show_overlay,
        }

    @classmethod
    def from_dict(cls, data):
        defaults = cls()
        settings = replace(
            defaults,
            options=RenderOptions.from_dict(data['options']) if 'options' in data else defaults.options,
            color=tuple(int(c) for c in normalize_color(data.get('color', defaults.color))),
            export_multiplier=int(data.get('export_multiplier', defaults.export_multiplier)),
            export_iterations=int(data.get('export_iterations', defaults.export_iterations)),
            export_name=str(data.get('export_name', defaults.export_name)),
            show_overlay=bool(data.get('show_overlay', defaults.show_overlay)),
        )
        if settings.export_multiplier < 1 or settings.export_iterations < 1:
            raise InvalidRenderOptions("export multiplier and iterations must be at least 1")
        return settings


def load_settings(path=SETTINGS_PATH):
    """Load settings from a JSON file, or defaults if it is unusable."""
    try:
        with open(path, 'r') as f:
            return Settings.from_dict(json.load(f))
    except FileNotFoundError:
        return Settings()
    except (OSError, TypeError, ValueError, AttributeError) as e:
        print(f"Warning: Could not load {os.path.basename(path)}: {e}")
        return Settings()


def save_settings(settings, path=SETTINGS_PATH):
    """Write settings to a JSON file."""
    with open(path, 'w') as f:
        json.dump(settings.to_dict(), f, indent=2)
