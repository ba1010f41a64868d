"""Transformation directives for a single provider request.

Directives are combined into one immutable value per request. Their
rendering order is fixed (size, format, quality, crop) so the same
request always maps to the same provider URL.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any

from sizeset.exceptions import ConfigValidationError

DIRECTIVE_ORDER: tuple[str, ...] = ("size", "format", "quality", "crop")


@dataclass(frozen=True, slots=True)
class Directives:
    """Immutable, ordered set of transformation directives.

    Attributes:
        width: Target width in px, or ``None``.
        height: Target height in px, or ``None``.
        format: Output format name (``"webp"``), or ``None`` to keep the source's.
        quality: Output quality 0-100, or ``None``.
        crop: Crop mode understood by the provider, or ``None`` for no crop.
    """

    width: int | None = None
    height: int | None = None
    format: str | None = None
    quality: int | None = None
    crop: str | None = None

    def __post_init__(self) -> None:
        for name in ("width", "height"):
            value = getattr(self, name)
            if value is not None and value < 0:
                raise ConfigValidationError(f"Directive {name} must be non-negative, got {value}")
        if self.quality is not None and not 0 <= self.quality <= 100:
            raise ConfigValidationError(f"Directive quality must be within 0-100, got {self.quality}")

    @classmethod
    def from_mapping(cls, values: dict[str, Any]) -> Directives:
        """Build directives from a preset-style mapping, ignoring unknown keys."""
        known = {key: values[key] for key in ("width", "height", "format", "quality", "crop") if key in values}
        return cls(**known)

    def with_size(self, width: int | None, height: int | None) -> Directives:
        """Return a copy with the size directive replaced."""
        return replace(self, width=width, height=height)

    def with_format(self, fmt: str | None) -> Directives:
        """Return a copy with the format directive replaced."""
        return replace(self, format=fmt)

    def items(self) -> list[tuple[str, Any]]:
        """Return the set directives as ``(kind, value)`` pairs in fixed order.

        The size value is a ``(width, height)`` tuple where either side may be
        ``None``; it is omitted entirely when both are.
        """
        pairs: list[tuple[str, Any]] = []
        if self.width is not None or self.height is not None:
            pairs.append(("size", (self.width, self.height)))
        if self.format:
            pairs.append(("format", self.format))
        if self.quality is not None:
            pairs.append(("quality", self.quality))
        if self.crop:
            pairs.append(("crop", self.crop))
        return pairs
