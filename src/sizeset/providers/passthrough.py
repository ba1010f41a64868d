"""Passthrough provider: every request resolves to the untouched source.

Useful when no transformation service is deployed. Sizing attributes are
still produced, but every candidate points at the original file.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sizeset.providers.base import ImageProvider
from sizeset.providers.registry import register_provider

if TYPE_CHECKING:
    from sizeset.config import SizesetConfig
    from sizeset.directives import Directives


@register_provider("none")
class PassthroughProvider(ImageProvider):
    """Returns ``src`` unchanged regardless of directives."""

    def __init__(self, config: SizesetConfig | None = None) -> None:
        pass

    @property
    def name(self) -> str:
        """Return ``'none'``."""
        return "none"

    def build_url(self, src: str, directives: Directives) -> str:
        return src
