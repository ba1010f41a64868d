"""Image provider subsystem for sizeset.

Re-exports the ABC, registry, and the built-in providers::

    from sizeset.providers import ImageProvider, ProviderRegistry
    from sizeset.providers import IPXProvider, PassthroughProvider
"""

from sizeset.providers.base import ImageProvider
from sizeset.providers.ipx import IPXProvider, encode_path
from sizeset.providers.passthrough import PassthroughProvider
from sizeset.providers.registry import ProviderRegistry, register_provider

__all__ = [
    "IPXProvider",
    "ImageProvider",
    "PassthroughProvider",
    "ProviderRegistry",
    "encode_path",
    "register_provider",
]
