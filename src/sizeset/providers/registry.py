"""Name-to-class lookup for image providers.

``SizesetConfig.provider`` names the provider a resolver builds. Names are
matched case-insensitively. The built-in ``ipx`` and ``none`` providers
register themselves with :func:`register_provider` when
:mod:`sizeset.providers` is imported. Other distributions can contribute
providers through the ``sizeset.providers`` entry-point group, e.g. in
their ``pyproject.toml``::

    [project.entry-points."sizeset.providers"]
    my_cdn = "my_package.cdn:MyCdnProvider"

Entry points are scanned at most once, the first time a name is missing
or the full list is requested.
"""

from __future__ import annotations

import importlib.metadata
import logging
from typing import TYPE_CHECKING, ClassVar

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

    from sizeset.config import SizesetConfig
    from sizeset.providers.base import ImageProvider

    ProviderClass = type[ImageProvider]

logger = logging.getLogger("sizeset")

_ENTRY_POINT_GROUP = "sizeset.providers"


def _normalize(name: str) -> str:
    return name.strip().lower()


def _discover() -> Iterator[importlib.metadata.EntryPoint]:
    try:
        yield from importlib.metadata.entry_points(group=_ENTRY_POINT_GROUP)
    except Exception:  # Metadata errors are logged, never raised.
        logger.warning("Cannot read entry points of group %s", _ENTRY_POINT_GROUP, exc_info=True)


class ProviderRegistry:
    """Class-level table of provider classes keyed by normalized name.

    Registered classes are instantiated by :meth:`build` with the active
    :class:`~sizeset.config.SizesetConfig` as their only argument.
    """

    _registry: ClassVar[dict[str, ProviderClass]] = {}
    _entry_points_loaded: ClassVar[bool] = False

    @classmethod
    def register(cls, name: str) -> Callable[[ProviderClass], ProviderClass]:
        """Class decorator adding a provider under *name*.

        Raises:
            ValueError: If *name* is already taken by a different class.
        """
        key = _normalize(name)

        def decorator(provider_cls: ProviderClass) -> ProviderClass:
            existing = cls._registry.get(key)
            if existing is not None and existing is not provider_cls:
                raise ValueError(
                    f"Image provider {key!r} is already registered to {existing.__qualname__}"
                )
            cls._registry[key] = provider_cls
            return provider_cls

        return decorator

    @classmethod
    def get(cls, name: str) -> ProviderClass:
        """Return the provider class registered under *name*.

        Raises:
            KeyError: If no built-in or entry-point provider has that name.
        """
        key = _normalize(name)
        if key not in cls._registry and not cls._entry_points_loaded:
            cls._load_entry_points()
        try:
            return cls._registry[key]
        except KeyError:
            available = ", ".join(sorted(cls._registry)) or "(none)"
            raise KeyError(f"Unknown image provider: {name!r}. Available: {available}") from None

    @classmethod
    def build(cls, config: SizesetConfig) -> ImageProvider:
        """Instantiate the provider named by ``config.provider``."""
        return cls.get(config.provider)(config)  # type: ignore[call-arg]

    @classmethod
    def list_available(cls) -> list[str]:
        """Sorted names of every known provider, entry points included."""
        if not cls._entry_points_loaded:
            cls._load_entry_points()
        return sorted(cls._registry)

    @classmethod
    def _load_entry_points(cls) -> None:
        # Names already registered in-process win over entry points.
        cls._entry_points_loaded = True
        for ep in _discover():
            key = _normalize(ep.name)
            if key in cls._registry:
                continue
            try:
                cls._registry[key] = ep.load()
            except Exception:  # Plugin failures are logged, never raised.
                logger.warning(
                    "Skipping image provider entry point %r (%s)", ep.name, ep.value, exc_info=True
                )
            else:
                logger.debug("Image provider %r loaded from %s", key, ep.value)

    @classmethod
    def _reset(cls) -> None:
        """Forget every registration. Used by tests only."""
        cls._registry.clear()
        cls._entry_points_loaded = False


register_provider = ProviderRegistry.register
