"""Data types for the sizing subsystem."""

from __future__ import annotations

import math
from dataclasses import dataclass
from fractions import Fraction


def round_half_up(value: Fraction | float) -> int:
    """Round to the nearest integer, halves away from zero for positives.

    Python's ``round()`` rounds halves to even, which would make
    ``round(0.5 * 5)`` and ``round(0.5 * 7)`` disagree in direction.
    """
    return math.floor(value + Fraction(1, 2))


@dataclass(frozen=True, slots=True)
class SizeToken:
    """One parsed descriptor token.

    Attributes:
        key: Breakpoint key, or ``None`` for a bare (no-colon) token.
        raw_value: The size literal as written (``"500"``, ``"100vw"``, ``"40rem"``).
    """

    key: str | None
    raw_value: str


@dataclass(frozen=True, slots=True)
class AspectRatio:
    """Width-to-height ratio derived once from the declared dimensions.

    Stored as an exact rational so every candidate's height is derived
    from its width with a single integer rounding step.

    Attributes:
        value: ``width / height`` as a Fraction.
    """

    value: Fraction

    @classmethod
    def from_dimensions(cls, width: int | None, height: int | None) -> AspectRatio | None:
        """Build the ratio, or ``None`` when either dimension is missing or zero."""
        if not width or not height:
            return None
        return cls(Fraction(width, height))

    def height_for(self, width: int) -> int:
        """Return ``round(width / ratio)``."""
        return round_half_up(Fraction(width) / self.value)


@dataclass(frozen=True, slots=True)
class Candidate:
    """One resolved responsive candidate.

    Attributes:
        threshold_px: ``max-width`` threshold, ``None`` for the terminal candidate.
        width_px: Rendered width, ``None`` when the size is a non-numeric CSS
            length (such candidates appear in the sizes string only).
        height_px: Height derived from the aspect ratio, ``None`` when no
            ratio is known or the width is unknown.
        css_size: Size as written into the media string (``"500px"``, ``"100vw"``).
        is_last: True only for the terminal, unconditional candidate.
        key: Breakpoint key the candidate was declared for.
    """

    threshold_px: int | None
    width_px: int | None
    height_px: int | None
    css_size: str
    is_last: bool = False
    key: str | None = None


@dataclass(frozen=True, slots=True)
class SourceCandidate:
    """One srcset entry: a provider URL paired with its intrinsic width.

    Attributes:
        url: Provider URL for this width.
        width_px: Width descriptor (rendered as ``{width_px}w``).
    """

    url: str
    width_px: int

    def __str__(self) -> str:
        return f"{self.url} {self.width_px}w"
