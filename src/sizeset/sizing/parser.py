"""Sizing descriptor tokenizer.

A descriptor is a list of tokens separated by commas and/or whitespace::

    "200, 500:500, 900:900"
    "xs:100vw sm:100vw md:300px lg:350px"

Tokens are either ``key:value`` (explicit breakpoint association) or a
bare ``value``. Breakpoint keys are not validated here; the resolver is
the single point of validation.
"""

from __future__ import annotations

import re

from sizeset.exceptions import MalformedDescriptorError
from sizeset.sizing.types import SizeToken

_WHITESPACE = re.compile(r"\s+")


def parse_descriptor(descriptor: str | None) -> list[SizeToken]:
    """Tokenize *descriptor* into ordered SizeTokens.

    Args:
        descriptor: The sizing descriptor, or ``None``.

    Returns:
        Tokens in declaration order. Empty for a ``None`` or blank descriptor.

    Raises:
        MalformedDescriptorError: If a token is empty (``"a,,b"``, trailing
            comma) or a ``key:value`` token has an empty side.
    """
    if descriptor is None or not descriptor.strip():
        return []

    tokens: list[SizeToken] = []
    for group in descriptor.split(","):
        words = _WHITESPACE.split(group.strip())
        if words == [""]:
            raise MalformedDescriptorError(f"Empty token in sizing descriptor {descriptor!r}")
        for word in words:
            tokens.append(_parse_token(word, descriptor))
    return tokens


def _parse_token(text: str, descriptor: str) -> SizeToken:
    if ":" not in text:
        return SizeToken(key=None, raw_value=text)

    key, _, value = text.partition(":")
    if not key or not value:
        raise MalformedDescriptorError(
            f"Unterminated token {text!r} in sizing descriptor {descriptor!r}"
        )
    return SizeToken(key=key, raw_value=value)
