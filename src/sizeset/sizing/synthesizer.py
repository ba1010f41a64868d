"""Media/srcset synthesis.

Ordering is significant: browsers apply the first matching media
condition, so entries are emitted in ascending threshold order with the
unconditional size last.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sizeset.sizing.types import SourceCandidate

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from sizeset.sizing.types import Candidate


def build_media_sizes(candidates: Sequence[Candidate]) -> str | None:
    """Render the ``sizes`` attribute value.

    Args:
        candidates: Resolved candidates, terminal candidate last.

    Returns:
        ``"(max-width: 500px) 500px, 900px"``-style string, or ``None`` when
        there are no candidates.
    """
    if not candidates:
        return None
    parts = []
    for candidate in candidates:
        if candidate.is_last or candidate.threshold_px is None:
            parts.append(candidate.css_size)
        else:
            parts.append(f"(max-width: {candidate.threshold_px}px) {candidate.css_size}")
    return ", ".join(parts)


def build_source_candidates(
    candidates: Sequence[Candidate],
    url_for: Callable[[Candidate], str],
) -> list[SourceCandidate]:
    """Pair every width-bearing candidate with its provider URL.

    Candidates without a pixel width (non-numeric CSS lengths) are skipped;
    they still contribute to the sizes string.
    """
    return [
        SourceCandidate(url=url_for(candidate), width_px=candidate.width_px)
        for candidate in candidates
        if candidate.width_px is not None
    ]


def format_srcset(entries: Sequence[SourceCandidate]) -> str:
    """Render ``"{url} {width}w"`` entries joined by ``", "``."""
    return ", ".join(str(entry) for entry in entries)


def default_candidate(candidates: Sequence[Candidate]) -> Candidate | None:
    """Return the candidate the default ``src`` is built from.

    That is the terminal candidate, or the last width-bearing one when the
    terminal size is a non-numeric CSS length.
    """
    for candidate in reversed(candidates):
        if candidate.width_px is not None:
            return candidate
    return None
