"""Format/source selection.

Decides, for one source, whether transformation runs at all and which
output formats are offered:

- Vector sources (``.svg`` by default) and absolute URLs on hosts outside
  the configured ``domains`` pass through untouched.
- Otherwise every requested format becomes an alternate source group, and
  one fallback group uses the source's own format, or the caller's
  explicit format, which replaces it.
"""

from __future__ import annotations

import posixpath
from dataclasses import dataclass
from typing import TYPE_CHECKING
from urllib.parse import urlsplit

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sizeset.config import SizesetConfig

_FORMAT_ALIASES: dict[str, str] = {"jpg": "jpeg"}
_MIME_TYPES: dict[str, str] = {"svg": "image/svg+xml"}
_DEFAULT_FALLBACK = "jpeg"


@dataclass(frozen=True, slots=True)
class FormatPlan:
    """Outcome of format selection for one source.

    Attributes:
        passthrough: True when the source must be emitted unchanged.
        alternates: Formats for the alternate source groups, in request order.
        fallback: Format of the fallback group, ``None`` for passthrough.
    """

    passthrough: bool
    alternates: tuple[str, ...] = ()
    fallback: str | None = None


def normalize_format(fmt: str) -> str:
    """Lower-case *fmt* and map aliases (``jpg`` -> ``jpeg``)."""
    fmt = fmt.lower().lstrip(".")
    return _FORMAT_ALIASES.get(fmt, fmt)


def source_format(src: str) -> str | None:
    """Return the normalized extension of *src*, ignoring query and fragment."""
    path = urlsplit(src).path
    _, ext = posixpath.splitext(path)
    if not ext or ext == ".":
        return None
    return normalize_format(ext)


def mime_type(fmt: str) -> str:
    """Return the MIME type for an output format (``webp`` -> ``image/webp``)."""
    fmt = normalize_format(fmt)
    return _MIME_TYPES.get(fmt, f"image/{fmt}")


def _host(value: str) -> str:
    parts = urlsplit(value if "//" in value else f"//{value}")
    return (parts.hostname or "").lower()


def is_transformable(src: str, config: SizesetConfig) -> bool:
    """Whether *src* may be routed through the transformation provider.

    Args:
        src: Source path or absolute URL.
        config: Provides ``vector_formats`` and ``domains``.

    Returns:
        False for vector sources and for absolute URLs whose host is not
        in ``config.domains``.
    """
    fmt = source_format(src)
    if fmt is not None and fmt in {normalize_format(v) for v in config.vector_formats}:
        return False

    parts = urlsplit(src)
    if parts.netloc:
        allowed = {_host(domain) for domain in config.domains}
        return (parts.hostname or "").lower() in allowed
    return True


def select_formats(
    src: str,
    requested: Sequence[str],
    override: str | None,
    config: SizesetConfig,
) -> FormatPlan:
    """Plan the source groups for *src*.

    Args:
        src: Source path or absolute URL.
        requested: Alternate output formats, in preference order.
        override: Caller's explicit format; replaces the fallback format.
        config: Active configuration.

    Returns:
        The FormatPlan. Passthrough plans carry no formats at all.
    """
    if not is_transformable(src, config):
        return FormatPlan(passthrough=True)

    if override:
        fallback = normalize_format(override)
    else:
        fallback = source_format(src) or _DEFAULT_FALLBACK
    return FormatPlan(
        passthrough=False,
        alternates=tuple(normalize_format(fmt) for fmt in requested),
        fallback=fallback,
    )
