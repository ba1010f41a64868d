"""Candidate resolver.

Turns keyed SizeTokens into Candidates sorted by ascending breakpoint
threshold. The candidate declared for the largest breakpoint becomes the
terminal, unconditional entry.

Width rules:
    ``"500"`` / ``"500px"``  -> 500
    ``"100vw"``              -> round(threshold * 100 / 100)
    anything else            -> no width; kept verbatim for the sizes string

No de-duplication is performed: tokens resolving to identical widths each
produce their own candidate.
"""

from __future__ import annotations

import re
from fractions import Fraction
from typing import TYPE_CHECKING

from sizeset.sizing.types import AspectRatio, Candidate, SizeToken, round_half_up

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sizeset.breakpoints import BreakpointTable

_NUMERIC_SIZE = re.compile(r"^(\d+(?:\.\d+)?)(px|vw)?$")


class CandidateResolver:
    """Stateless token-to-candidate resolver.

    Holds no mutable state and is safe to share between resolutions.
    """

    def resolve(
        self,
        tokens: Sequence[SizeToken],
        table: BreakpointTable,
        ratio: AspectRatio | None,
    ) -> list[Candidate]:
        """Resolve keyed tokens into sorted candidates.

        Bare tokens (``key is None``) never contribute a candidate.

        Args:
            tokens: Parsed descriptor tokens.
            table: Active breakpoint table.
            ratio: Declared aspect ratio, or ``None`` if unknown.

        Returns:
            Candidates in ascending threshold order, the last one terminal.
            Empty when no token carries a key.

        Raises:
            UnknownBreakpointError: If a token's key is not in *table* and is
                not an integer literal.
        """
        resolved: list[tuple[int, Candidate]] = []
        for token in tokens:
            if token.key is None:
                continue
            threshold = table.threshold(token.key)
            width, css_size = self._measure(token.raw_value, threshold)
            height = ratio.height_for(width) if ratio is not None and width is not None else None
            resolved.append(
                (
                    threshold,
                    Candidate(
                        threshold_px=threshold,
                        width_px=width,
                        height_px=height,
                        css_size=css_size,
                        key=token.key,
                    ),
                )
            )

        # Stable: equal thresholds keep declaration order.
        resolved.sort(key=lambda item: item[0])
        candidates = [candidate for _, candidate in resolved]
        if candidates:
            last = candidates[-1]
            candidates[-1] = Candidate(
                threshold_px=None,
                width_px=last.width_px,
                height_px=last.height_px,
                css_size=last.css_size,
                is_last=True,
                key=last.key,
            )
        return candidates

    @staticmethod
    def fallback(width: int | None, height: int | None) -> Candidate:
        """Single non-responsive candidate built from the declared dimensions."""
        return Candidate(
            threshold_px=None,
            width_px=width,
            height_px=height,
            css_size=f"{width}px" if width is not None else "100vw",
            is_last=True,
        )

    @staticmethod
    def _measure(raw_value: str, threshold: int) -> tuple[int | None, str]:
        """Return ``(width_px, css_size)`` for one size literal."""
        match = _NUMERIC_SIZE.match(raw_value)
        if match is None:
            return None, raw_value

        number, unit = match.groups()
        if unit == "vw":
            return round_half_up(Fraction(threshold) * Fraction(number) / 100), raw_value
        return round_half_up(Fraction(number)), raw_value if unit else f"{raw_value}px"
