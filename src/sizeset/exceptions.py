"""Exception hierarchy for sizeset.

All exceptions derive from SizesetError, enabling broad catch patterns
at the rendering boundary while allowing fine-grained handling internally.
"""


class SizesetError(Exception):
    """Base exception for all sizeset errors."""


class ConfigValidationError(SizesetError):
    """Configuration field validation failed.

    Raised when per-image overrides contain unknown keys, attempt to
    override infrastructure fields, name an unknown preset, or fail
    type validation.
    """


class MalformedDescriptorError(SizesetError):
    """A sizing descriptor could not be tokenized.

    Raised for empty tokens and for ``key:value`` tokens with an empty
    key or value. No partial result is returned.
    """


class UnknownBreakpointError(SizesetError):
    """A descriptor token names a breakpoint absent from the active table.

    Attributes:
        key: The breakpoint key that could not be resolved.
    """

    def __init__(self, key: str, available: list[str] | None = None) -> None:
        self.key = key
        listed = ", ".join(available) if available else "(none)"
        super().__init__(f"Unknown breakpoint: {key!r}. Available: {listed}")


class EncodingFailureError(SizesetError):
    """A source path could not be percent-encoded.

    Only reachable for strings that are not valid Unicode text (for
    example lone surrogates), so it signals a programming defect upstream.
    """


class PreloadError(SizesetError):
    """The full-resolution image of a placeholder session failed to load.

    Delivered to the rendering layer as the session's failure signal.
    The engine never retries a failed preload.
    """
