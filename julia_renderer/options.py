"""Render options for a single Julia set render."""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, replace
from enum import Enum


class InvalidRenderOptions(ValueError):
    """Raised when a render is requested with unusable parameters."""


class FillStyle(Enum):
    """How to color points that never escape."""

    BRIGHT = "Bright"
    BLACK = "Black"


@dataclass(frozen=True)
class RenderOptions:
    """Parameters that describe a single render of a Julia set."""

    width: int = 512
    height: int = 512
    unit_width: float = 4.0
    max_iterations: int = 128
    cx: float = -0.981
    cy: float = -0.277
    fill_style: FillStyle = FillStyle.BRIGHT

    @property
    def scale(self) -> float:
        """Pixels per complex-plane unit."""
        return self.width / self.unit_width

    def validate(self) -> RenderOptions:
        if self.width <= 0 or self.height <= 0:
            raise InvalidRenderOptions(
                f"dimensions must be positive, got {self.width}x{self.height}"
            )
        if not math.isfinite(self.unit_width) or self.unit_width <= 0:
            raise InvalidRenderOptions(f"unit_width must be positive, got {self.unit_width}")
        if self.max_iterations < 1:
            raise InvalidRenderOptions(f"max_iterations must be at least 1, got {self.max_iterations}")
        if not (math.isfinite(self.cx) and math.isfinite(self.cy)):
            raise InvalidRenderOptions(f"constant must be finite, got ({self.cx}, {self.cy})")
        if not isinstance(self.fill_style, FillStyle):
            raise InvalidRenderOptions(f"unknown fill style {self.fill_style!r}")
        return self

    def for_export(self, multiplier: int, max_iterations: int) -> RenderOptions:
        """Scale the resolution up for an export render, keeping the view."""
        if multiplier < 1:
            raise InvalidRenderOptions(f"resolution multiplier must be at least 1, got {multiplier}")
        return replace(
            self,
            width=self.width * multiplier,
            height=self.height * multiplier,
            max_iterations=max_iterations,
        )

    def to_dict(self) -> dict:
        data = asdict(self)
        data["fill_style"] = self.fill_style.value
        return data

    @classmethod
    def from_dict(cls, data: dict) -> RenderOptions:
        try:
            options = cls(
                width=int(data["width"]),
                height=int(data["height"]),
                unit_width=float(data["unit_width"]),
                max_iterations=int(data["max_iterations"]),
                cx=float(data["cx"]),
                cy=float(data["cy"]),
                fill_style=FillStyle(data["fill_style"]),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise InvalidRenderOptions(f"bad render options {data!r}: {e}") from e
        return options.validate()
