"""Data types for the diagnostic logging subsystem."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ResolutionRecord:
    """Immutable record of a single image resolution.

    Attributes:
        timestamp_ns: Wall-clock time of resolution (nanoseconds since epoch).
        resolve_ms: Time spent resolving (milliseconds).
        src: Source path that was resolved.
        provider: Name of the provider that built the URLs.
        kind: ``"img"``, ``"picture"`` or ``"placeholder"``.
        num_candidates: Number of srcset entries in the fallback group.
        media_sizes: The ``sizes`` attribute value, or ``None``.
        default_url: The default ``src`` URL.
        degenerate: True if a descriptor was given but no candidate resolved.
        passthrough: True if the source bypassed transformation.
        config_hash: 16-char SHA-256 prefix of the active config.
    """

    # Timing
    timestamp_ns: int
    resolve_ms: float

    # Request
    src: str
    provider: str
    kind: str

    # Outcome
    num_candidates: int
    media_sizes: str | None
    default_url: str
    degenerate: bool
    passthrough: bool

    # Config snapshot
    config_hash: str
