"""Source metadata providers.

Supply intrinsic ``(width, height)`` for sources whose dimensions the
caller did not declare. A provider's ``get_size()`` may answer directly
or return an awaitable; :func:`lookup_size` accepts both and keeps
blocking lookups off the event loop.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Protocol, runtime_checkable
from urllib.parse import unquote, urlsplit

from PIL import Image, UnidentifiedImageError

if TYPE_CHECKING:
    from collections.abc import Awaitable, Mapping

logger = logging.getLogger("sizeset")

Size = tuple[int, int]


@runtime_checkable
class SourceMetadataProvider(Protocol):
    """Anything that can report the intrinsic size of a source."""

    def get_size(self, src: str) -> Size | None | Awaitable[Size | None]:
        """Return ``(width, height)``, ``None`` if unknown, or an awaitable of either."""
        ...


class StaticMetadataProvider:
    """In-memory lookup table of source path to intrinsic size."""

    def __init__(self, sizes: Mapping[str, Size]) -> None:
        self._sizes = dict(sizes)

    def get_size(self, src: str) -> Size | None:
        return self._sizes.get(src)


class PillowMetadataProvider:
    """Reads intrinsic sizes from image files under *root* using Pillow.

    Only the image header is parsed; pixel data is never decoded. Absolute
    URLs and paths escaping *root* are reported as unknown.

    Args:
        root: Directory that source paths are resolved against.
    """

    def __init__(self, root: Path | str) -> None:
        self._root = Path(root).resolve()

    def get_size(self, src: str) -> Size | None:
        parts = urlsplit(src)
        if parts.scheme or parts.netloc:
            return None

        path = (self._root / unquote(parts.path).lstrip("/")).resolve()
        if not path.is_relative_to(self._root) or not path.is_file():
            logger.debug("No local file for source %s", src)
            return None

        try:
            with Image.open(path) as img:
                return img.size
        except (UnidentifiedImageError, OSError) as exc:
            logger.debug("Cannot read image header of %s: %s", path, exc)
            return None


async def lookup_size(provider: SourceMetadataProvider, src: str) -> Size | None:
    """Query *provider* for the size of *src*.

    Coroutine ``get_size`` implementations are awaited directly; plain ones
    run in a worker thread since they may block on file or network I/O.
    """
    if inspect.iscoroutinefunction(provider.get_size):
        return await provider.get_size(src)  # type: ignore[misc]

    result = await asyncio.to_thread(provider.get_size, src)
    if inspect.isawaitable(result):
        result = await result
    return result
