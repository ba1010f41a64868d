"""sizeset: breakpoint-aware responsive image resolution.

Resolves a declarative sizing descriptor (``"sm:100vw md:50vw lg:400px"``)
into a default image URL, a width-conditioned srcset and the matching
``sizes`` media string, builds transformation-provider request paths,
selects multi-format sources, and manages placeholder-to-final swaps
with asynchronous preloading.
"""

from __future__ import annotations

try:
    from importlib.metadata import PackageNotFoundError, version

    __version__ = version("sizeset")
except PackageNotFoundError:
    __version__ = "0.0.0"

from sizeset.breakpoints import BreakpointTable
from sizeset.config import SizesetConfig, resolve_config, validate_overrides
from sizeset.directives import Directives
from sizeset.exceptions import (
    ConfigValidationError,
    EncodingFailureError,
    MalformedDescriptorError,
    PreloadError,
    SizesetError,
    UnknownBreakpointError,
)
from sizeset.image import (
    ImageRequest,
    ImageResolver,
    PictureSource,
    ResolvedImage,
    ResolvedPicture,
)
from sizeset.placeholder import ImageSlot, LoadSignal, PlaceholderSession, PlaceholderState

__all__ = [
    "BreakpointTable",
    "ConfigValidationError",
    "Directives",
    "EncodingFailureError",
    "ImageRequest",
    "ImageResolver",
    "ImageSlot",
    "LoadSignal",
    "MalformedDescriptorError",
    "PictureSource",
    "PlaceholderSession",
    "PlaceholderState",
    "PreloadError",
    "ResolvedImage",
    "ResolvedPicture",
    "SizesetConfig",
    "SizesetError",
    "UnknownBreakpointError",
    "__version__",
    "resolve_config",
    "validate_overrides",
]
