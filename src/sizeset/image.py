"""Image resolution: the integration layer for sizeset.

Orchestrates the full pipeline for one image:
    descriptor -> tokens -> candidates -> sizes/srcset + provider URLs.

Resolution is synchronous and pure: every call builds a fresh, immutable
:class:`ResolvedImage` (or :class:`ResolvedPicture`). Callers replace the
previous value whenever the source or sizing inputs change.
"""

from __future__ import annotations

import hashlib
import logging
import time
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any, Union

from sizeset.breakpoints import BreakpointTable
from sizeset.config import SizesetConfig, resolve_config
from sizeset.directives import Directives
from sizeset.exceptions import ConfigValidationError
from sizeset.formats import mime_type, select_formats
from sizeset.logging.logger import ResolutionLogger
from sizeset.logging.types import ResolutionRecord
from sizeset.metadata import lookup_size
from sizeset.providers import ProviderRegistry
from sizeset.sizing.parser import parse_descriptor
from sizeset.sizing.resolver import CandidateResolver
from sizeset.sizing.synthesizer import (
    build_media_sizes,
    build_source_candidates,
    default_candidate,
    format_srcset,
)
from sizeset.sizing.types import AspectRatio, Candidate, SourceCandidate

if TYPE_CHECKING:
    from sizeset.metadata import SourceMetadataProvider
    from sizeset.providers.base import ImageProvider

logger = logging.getLogger("sizeset")

PlaceholderSpec = Union[bool, int, tuple[int, int], tuple[int, int, int], str, None]


def _config_hash(config: SizesetConfig) -> str:
    """Return the first 16 hex characters of the SHA-256 of the config dump."""
    raw = config.model_dump_json().encode("utf-8")
    return hashlib.sha256(raw).hexdigest()[:16]


@dataclass(frozen=True, slots=True)
class ImageRequest:
    """Caller-declared inputs for one image.

    Attributes:
        src: Source path or absolute URL.
        sizes: Sizing descriptor (``"sm:100vw md:50vw lg:400px"``), or ``None``.
        width: Declared width in px.
        height: Declared height in px.
        format: Explicit output format; replaces the fallback format.
        quality: Output quality 0-100.
        crop: Provider crop mode.
        preset: Name of a configured preset filling unset fields.
        placeholder: Placeholder spec (``True``, size, ``(w, h[, q])`` or URL).
        formats: Alternate formats for picture resolution; config default if ``None``.
    """

    src: str
    sizes: str | None = None
    width: int | None = None
    height: int | None = None
    format: str | None = None
    quality: int | None = None
    crop: str | None = None
    preset: str | None = None
    placeholder: PlaceholderSpec = None
    formats: tuple[str, ...] | None = None


@dataclass(frozen=True, slots=True)
class ResolvedImage:
    """Terminal output consumed by the rendering layer.

    Attributes:
        default_url: URL for the plain ``src`` attribute.
        candidates: srcset entries in ascending threshold order.
        media_sizes_attr: ``sizes`` attribute value, ``None`` if non-responsive.
        width: Declared width, passed through for the rendered attribute.
        height: Declared height, passed through for the rendered attribute.
    """

    default_url: str
    candidates: tuple[SourceCandidate, ...] = ()
    media_sizes_attr: str | None = None
    width: int | None = None
    height: int | None = None

    @property
    def srcset(self) -> str | None:
        """Rendered ``srcset`` value, ``None`` for non-responsive images."""
        if self.media_sizes_attr is None or not self.candidates:
            return None
        return format_srcset(self.candidates)

    def to_attrs(self) -> dict[str, Any]:
        """Attribute mapping for an ``<img>`` element, absent attributes omitted."""
        attrs: dict[str, Any] = {"src": self.default_url}
        if self.width is not None:
            attrs["width"] = self.width
        if self.height is not None:
            attrs["height"] = self.height
        if self.media_sizes_attr is not None:
            attrs["sizes"] = self.media_sizes_attr
        srcset = self.srcset
        if srcset is not None:
            attrs["srcset"] = srcset
        return attrs


@dataclass(frozen=True, slots=True)
class PictureSource:
    """One alternate-format ``<source>`` group.

    Attributes:
        format: Output format name.
        image: The group's resolution.
    """

    format: str
    image: ResolvedImage

    @property
    def mime_type(self) -> str:
        return mime_type(self.format)

    @property
    def sizes(self) -> str | None:
        return self.image.media_sizes_attr

    @property
    def srcset(self) -> str:
        return self.image.srcset or self.image.default_url

    def to_attrs(self) -> dict[str, Any]:
        attrs: dict[str, Any] = {"type": self.mime_type}
        if self.sizes is not None:
            attrs["sizes"] = self.sizes
        attrs["srcset"] = self.srcset
        return attrs


@dataclass(frozen=True, slots=True)
class ResolvedPicture:
    """Multi-format output: alternate source groups plus the fallback image.

    Attributes:
        sources: Alternate-format groups, in requested order.
        img: Fallback group rendered on the ``<img>`` element.
        passthrough: True when the source bypassed transformation.
    """

    sources: tuple[PictureSource, ...]
    img: ResolvedImage
    passthrough: bool = False

    def to_attrs(self) -> dict[str, Any]:
        return {
            "sources": [source.to_attrs() for source in self.sources],
            "img": self.img.to_attrs(),
        }


class ImageResolver:
    """Resolves ImageRequests into rendering instructions.

    Args:
        config: Host-wide configuration. Loaded from the environment if ``None``.
        provider: Provider override; built from ``config.provider`` if ``None``.
        metadata: Optional source metadata provider used by the async
            variants to fill undeclared dimensions.
    """

    def __init__(
        self,
        config: SizesetConfig | None = None,
        provider: ImageProvider | None = None,
        metadata: SourceMetadataProvider | None = None,
    ) -> None:
        self._config = config if config is not None else SizesetConfig()
        self._table = BreakpointTable.from_config(self._config)
        self._provider = provider if provider is not None else ProviderRegistry.build(self._config)
        self._metadata = metadata
        self._candidates = CandidateResolver()
        self._logger = ResolutionLogger(self._config)
        self._config_hash = _config_hash(self._config)

        logger.debug(
            "ImageResolver initialized: provider=%s, breakpoints=%s",
            self._provider.name,
            dict(self._table),
        )

    @property
    def config(self) -> SizesetConfig:
        return self._config

    @property
    def breakpoints(self) -> BreakpointTable:
        return self._table

    @property
    def provider(self) -> ImageProvider:
        return self._provider

    @property
    def resolution_logger(self) -> ResolutionLogger:
        return self._logger

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def resolve(self, request: ImageRequest, overrides: dict[str, Any] | None = None) -> ResolvedImage:
        """Resolve a single ``<img>``.

        Args:
            request: Declared inputs.
            overrides: Per-image config overrides.

        Returns:
            A fresh ResolvedImage.

        Raises:
            MalformedDescriptorError: If ``request.sizes`` cannot be tokenized.
            UnknownBreakpointError: If the descriptor names an unknown key.
            ConfigValidationError: If overrides or the preset are invalid.
        """
        start = time.perf_counter()
        config = resolve_config(self._config, overrides)
        request = self._apply_preset(request)

        plan = select_formats(request.src, (), request.format, config)
        if plan.passthrough:
            image, degenerate = self._passthrough(request), False
        else:
            image, degenerate = self._resolve_group(request, config, request.format)

        self._record("img", request, image, config, start, degenerate, plan.passthrough)
        return image

    def resolve_picture(
        self, request: ImageRequest, overrides: dict[str, Any] | None = None
    ) -> ResolvedPicture:
        """Resolve a multi-format ``<picture>``.

        One source group per requested format plus the fallback ``<img>``
        group. Vector sources produce no source groups and an untouched
        ``<img>``.
        """
        start = time.perf_counter()
        config = resolve_config(self._config, overrides)
        request = self._apply_preset(request)

        requested = request.formats if request.formats is not None else tuple(config.formats)
        plan = select_formats(request.src, requested, request.format, config)
        if plan.passthrough:
            picture = ResolvedPicture(sources=(), img=self._passthrough(request), passthrough=True)
            degenerate = False
        else:
            sources = tuple(
                PictureSource(format=fmt, image=self._resolve_group(request, config, fmt)[0])
                for fmt in plan.alternates
            )
            img, degenerate = self._resolve_group(request, config, plan.fallback)
            picture = ResolvedPicture(sources=sources, img=img)

        self._record("picture", request, picture.img, config, start, degenerate, plan.passthrough)
        return picture

    def resolve_placeholder(
        self, request: ImageRequest, overrides: dict[str, Any] | None = None
    ) -> ResolvedImage | None:
        """Resolve the low-quality stand-in shown before the full image loads.

        Returns:
            A non-responsive ResolvedImage (``media_sizes_attr`` is ``None``),
            or ``None`` when ``request.placeholder`` is off.
        """
        spec = request.placeholder
        if spec is None or spec is False:
            return None

        start = time.perf_counter()
        config = resolve_config(self._config, overrides)
        request = self._apply_preset(request)

        plan = select_formats(request.src, (), request.format, config)
        if isinstance(spec, str):
            url = spec
        elif plan.passthrough:
            url = request.src
        else:
            width, height, quality = self._placeholder_size(spec, config)
            directives = self._base_directives(request, config, request.format)
            url = self._provider.build_url(
                request.src, replace(directives, width=width, height=height, quality=quality)
            )

        image = ResolvedImage(default_url=url, width=request.width, height=request.height)
        self._record("placeholder", request, image, config, start, False, plan.passthrough)
        return image

    async def resolve_async(
        self, request: ImageRequest, overrides: dict[str, Any] | None = None
    ) -> ResolvedImage:
        """Like :meth:`resolve`, filling undeclared dimensions from metadata first."""
        return self.resolve(await self.complete_dimensions(request), overrides)

    async def resolve_picture_async(
        self, request: ImageRequest, overrides: dict[str, Any] | None = None
    ) -> ResolvedPicture:
        """Like :meth:`resolve_picture`, filling undeclared dimensions first."""
        return self.resolve_picture(await self.complete_dimensions(request), overrides)

    async def complete_dimensions(self, request: ImageRequest) -> ImageRequest:
        """Fill missing width/height from the metadata provider.

        Declared dimensions always win. Without a provider, or when the
        provider does not know the source, the request is returned as is.
        """
        if self._metadata is None or (request.width is not None and request.height is not None):
            return request

        size = await lookup_size(self._metadata, request.src)
        if size is None:
            return request

        width, height = size
        return replace(
            request,
            width=request.width if request.width is not None else width,
            height=request.height if request.height is not None else height,
        )

    def validate(self, request: ImageRequest, overrides: dict[str, Any] | None = None) -> None:
        """Check a request's overrides, preset and sizing descriptor without resolving it.

        Raises:
            MalformedDescriptorError: If ``request.sizes`` cannot be tokenized.
            UnknownBreakpointError: If the descriptor names an unknown key.
            ConfigValidationError: If overrides or the preset are invalid.
        """
        resolve_config(self._config, overrides)
        request = self._apply_preset(request)
        self._candidates.resolve(parse_descriptor(request.sizes), self._table, None)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _resolve_group(
        self,
        request: ImageRequest,
        config: SizesetConfig,
        fmt: str | None,
    ) -> tuple[ResolvedImage, bool]:
        """Run parse -> resolve -> synthesize -> build for one output format.

        Returns:
            The resolved group and whether sizing degenerated to the
            non-responsive fallback.
        """
        directives = self._base_directives(request, config, fmt)
        tokens = parse_descriptor(request.sizes)
        ratio = AspectRatio.from_dimensions(request.width, request.height)
        candidates = self._candidates.resolve(tokens, self._table, ratio)

        anchor = default_candidate(candidates)
        if anchor is None:
            degenerate = any(token.key is not None for token in tokens)
            if degenerate:
                logger.debug(
                    "No resolvable candidate in sizes %r for %s, using declared size",
                    request.sizes,
                    request.src,
                )
            fallback = self._candidates.fallback(request.width, request.height)
            url = self._provider.build_url(
                request.src, directives.with_size(fallback.width_px, fallback.height_px)
            )
            entries = (
                (SourceCandidate(url=url, width_px=fallback.width_px),)
                if fallback.width_px is not None
                else ()
            )
            image = ResolvedImage(
                default_url=url,
                candidates=entries,
                media_sizes_attr=None,
                width=request.width,
                height=request.height,
            )
            return image, degenerate

        def url_for(candidate: Candidate) -> str:
            return self._provider.build_url(
                request.src, directives.with_size(candidate.width_px, candidate.height_px)
            )

        image = ResolvedImage(
            default_url=url_for(anchor),
            candidates=tuple(build_source_candidates(candidates, url_for)),
            media_sizes_attr=build_media_sizes(candidates),
            width=request.width,
            height=request.height,
        )
        return image, False

    @staticmethod
    def _base_directives(
        request: ImageRequest, config: SizesetConfig, fmt: str | None
    ) -> Directives:
        quality = request.quality if request.quality is not None else config.quality
        return Directives(format=fmt, quality=quality, crop=request.crop)

    @staticmethod
    def _passthrough(request: ImageRequest) -> ResolvedImage:
        return ResolvedImage(default_url=request.src, width=request.width, height=request.height)

    def _apply_preset(self, request: ImageRequest) -> ImageRequest:
        """Fill fields the request leaves unset from its named preset."""
        if request.preset is None:
            return request
        preset = self._config.presets.get(request.preset)
        if preset is None:
            available = ", ".join(sorted(self._config.presets)) or "(none)"
            raise ConfigValidationError(
                f"Unknown preset: {request.preset!r}. Available: {available}"
            )

        values = Directives.from_mapping(preset)
        return replace(
            request,
            width=request.width if request.width is not None else values.width,
            height=request.height if request.height is not None else values.height,
            format=request.format or values.format,
            quality=request.quality if request.quality is not None else values.quality,
            crop=request.crop or values.crop,
            preset=None,
        )

    @staticmethod
    def _placeholder_size(spec: Any, config: SizesetConfig) -> tuple[int, int, int]:
        """Normalize a placeholder spec into ``(width, height, quality)``."""
        quality = config.placeholder_quality
        if spec is True:
            return config.placeholder_width, config.placeholder_height, quality
        if isinstance(spec, int):
            return spec, spec, quality
        if isinstance(spec, (tuple, list)) and len(spec) == 2:
            return int(spec[0]), int(spec[1]), quality
        if isinstance(spec, (tuple, list)) and len(spec) == 3:
            return int(spec[0]), int(spec[1]), int(spec[2])
        raise ConfigValidationError(f"Invalid placeholder spec: {spec!r}")

    def _record(
        self,
        kind: str,
        request: ImageRequest,
        image: ResolvedImage,
        config: SizesetConfig,
        start: float,
        degenerate: bool,
        passthrough: bool,
    ) -> None:
        config_hash = self._config_hash if config is self._config else _config_hash(config)
        record = ResolutionRecord(
            timestamp_ns=time.time_ns(),
            resolve_ms=(time.perf_counter() - start) * 1000.0,
            src=request.src,
            provider=self._provider.name,
            kind=kind,
            num_candidates=len(image.candidates),
            media_sizes=image.media_sizes_attr,
            default_url=image.default_url,
            degenerate=degenerate,
            passthrough=passthrough,
            config_hash=config_hash,
        )
        self._logger.log_resolution(
            record, log_level=config.log_level, diagnostic_mode=config.diagnostic_mode
        )
