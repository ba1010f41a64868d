"""Breakpoint table: named viewport keys mapped to max-width thresholds."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING

from sizeset.exceptions import ConfigValidationError, UnknownBreakpointError

if TYPE_CHECKING:
    from sizeset.config import SizesetConfig


class BreakpointTable(Mapping[str, int]):
    """Immutable ordered mapping of breakpoint key to pixel threshold.

    Thresholds are strictly increasing in declaration order. Lookups via
    :meth:`threshold` also accept plain integer keys (``"500"``), which are
    taken as literal pixel thresholds.

    Args:
        entries: Key to threshold mapping, in conventional (ascending) order.

    Raises:
        ConfigValidationError: If a threshold is not a positive integer or
            the thresholds are not strictly increasing.
    """

    __slots__ = ("_entries",)

    def __init__(self, entries: Mapping[str, int]) -> None:
        previous = 0
        for key, threshold in entries.items():
            if isinstance(threshold, bool) or not isinstance(threshold, int) or threshold <= 0:
                raise ConfigValidationError(
                    f"Breakpoint {key!r} must map to a positive integer, got {threshold!r}"
                )
            if threshold <= previous:
                raise ConfigValidationError(
                    f"Breakpoints must be strictly increasing: {key!r}={threshold} follows {previous}"
                )
            previous = threshold
        self._entries: Mapping[str, int] = MappingProxyType(dict(entries))

    @classmethod
    def from_config(cls, config: SizesetConfig) -> BreakpointTable:
        """Build the table from ``config.breakpoints``."""
        return cls(config.breakpoints)

    def __getitem__(self, key: str) -> int:
        return self._entries[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"BreakpointTable({dict(self._entries)!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, BreakpointTable):
            return list(self._entries.items()) == list(other._entries.items())
        return NotImplemented

    def __hash__(self) -> int:
        return hash(tuple(self._entries.items()))

    def threshold(self, key: str) -> int:
        """Return the pixel threshold for *key*.

        Args:
            key: A configured breakpoint name or a non-negative integer literal.

        Returns:
            Threshold in pixels.

        Raises:
            UnknownBreakpointError: If *key* is neither configured nor an
                integer literal.
        """
        if key in self._entries:
            return self._entries[key]
        if key.isascii() and key.isdigit():
            return int(key)
        raise UnknownBreakpointError(key, list(self._entries))
