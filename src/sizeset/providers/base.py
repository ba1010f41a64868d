"""Abstract base class for image providers.

A provider turns a source path plus a :class:`~sizeset.directives.Directives`
set into the request path of a remote transformation service. Providers
only construct URLs; they never fetch or decode image bytes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from sizeset.directives import Directives


class ImageProvider(ABC):
    """Abstract base for all image providers.

    ``build_url()`` must be a pure function of its arguments: the same
    ``(src, directives)`` pair always yields byte-identical output.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Registered provider identifier (e.g., ``'ipx'``)."""

    @abstractmethod
    def build_url(self, src: str, directives: Directives) -> str:
        """Return the provider request path for *src* under *directives*.

        Args:
            src: Source path or absolute URL of the original image.
            directives: Transformation directives for this request.

        Returns:
            Request path understood by the transformation service.

        Raises:
            EncodingFailureError: If *src* cannot be percent-encoded.
        """
