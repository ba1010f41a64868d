"""IPX-style transform URL builder.

Builds request paths of the form::

    /{prefix}/{directives}/{encoded source path}

where ``directives`` is the ``&``-joined list of ``{shortKey}_{value}``
pairs in fixed order:

========  ================================================
size      ``s_{w}x{h}`` (``w_{w}`` / ``h_{h}`` if only one side is known)
format    ``f_{name}``
quality   ``q_{0-100}``
crop      ``c_{mode}``
========  ================================================

An empty directive set renders as ``_``. Every path segment of the source
is percent-encoded (UTF-8), ``/`` separators are kept.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any
from urllib.parse import quote

from sizeset.exceptions import EncodingFailureError
from sizeset.providers.base import ImageProvider
from sizeset.providers.registry import register_provider

if TYPE_CHECKING:
    from sizeset.config import SizesetConfig
    from sizeset.directives import Directives

# RFC 3986 sub-delims plus ':' and '@' are legal inside a path segment.
_SEGMENT_SAFE = "!$&'()*+,;=:@"

_SHORT_KEYS: dict[str, str] = {
    "format": "f",
    "quality": "q",
    "crop": "c",
}


def encode_path(path: str) -> str:
    """Percent-encode every segment of *path*, preserving ``/``.

    Args:
        path: Source path, possibly containing non-ASCII characters.

    Returns:
        The encoded path. ``urllib.parse.unquote`` restores the original.

    Raises:
        EncodingFailureError: If *path* is not encodable as UTF-8.
    """
    try:
        return "/".join(quote(segment, safe=_SEGMENT_SAFE) for segment in path.split("/"))
    except UnicodeEncodeError as exc:
        raise EncodingFailureError(f"Cannot percent-encode source path {path!r}") from exc


def format_directive(kind: str, value: Any) -> str:
    """Render one ``(kind, value)`` pair from :meth:`Directives.items`."""
    if kind == "size":
        width, height = value
        if width is not None and height is not None:
            return f"s_{width}x{height}"
        if width is not None:
            return f"w_{width}"
        return f"h_{height}"
    return f"{_SHORT_KEYS[kind]}_{value}"


@register_provider("ipx")
class IPXProvider(ImageProvider):
    """Transform URL builder for an IPX-compatible image service.

    Args:
        config: Configuration providing ``provider_prefix``.
    """

    def __init__(self, config: SizesetConfig) -> None:
        self._prefix = config.provider_prefix.strip("/")

    @property
    def name(self) -> str:
        """Return ``'ipx'``."""
        return "ipx"

    @property
    def prefix(self) -> str:
        """Path prefix without surrounding slashes."""
        return self._prefix

    def build_url(self, src: str, directives: Directives) -> str:
        """Build ``/{prefix}/{directives}/{encoded src}``.

        Args:
            src: Source path or absolute URL.
            directives: Directives to encode ahead of the source path.

        Returns:
            The provider request path.
        """
        operations = "&".join(format_directive(kind, value) for kind, value in directives.items())
        encoded = encode_path(src.lstrip("/"))
        parts = [self._prefix] if self._prefix else []
        parts.extend([operations or "_", encoded])
        return "/" + "/".join(parts)
