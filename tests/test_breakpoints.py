"""Tests for BreakpointTable."""

from __future__ import annotations

import pytest

from sizeset.breakpoints import BreakpointTable
from sizeset.config import DEFAULT_BREAKPOINTS, SizesetConfig
from sizeset.exceptions import ConfigValidationError, UnknownBreakpointError


@pytest.fixture
def table() -> BreakpointTable:
    return BreakpointTable(DEFAULT_BREAKPOINTS)


class TestBreakpointTable:
    """Tests for the immutable ordered breakpoint mapping."""

    def test_preserves_declaration_order(self, table: BreakpointTable) -> None:
        assert list(table) == ["xs", "sm", "md", "lg", "xl", "2xl"]
        assert len(table) == 6

    def test_lookup_named_key(self, table: BreakpointTable) -> None:
        assert table.threshold("md") == 768
        assert table["2xl"] == 1536

    def test_integer_key_is_literal_threshold(self, table: BreakpointTable) -> None:
        assert table.threshold("500") == 500

    def test_unknown_key_raises(self, table: BreakpointTable) -> None:
        with pytest.raises(UnknownBreakpointError, match="tablet") as excinfo:
            table.threshold("tablet")
        assert excinfo.value.key == "tablet"
        assert "xs" in str(excinfo.value)

    def test_negative_literal_is_unknown(self, table: BreakpointTable) -> None:
        with pytest.raises(UnknownBreakpointError):
            table.threshold("-5")

    def test_immutable(self, table: BreakpointTable) -> None:
        with pytest.raises(TypeError):
            table["xs"] = 1  # type: ignore[index]

    def test_source_mapping_changes_do_not_leak(self) -> None:
        source = {"a": 100, "b": 200}
        table = BreakpointTable(source)
        source["c"] = 300
        assert "c" not in table

    def test_rejects_non_increasing(self) -> None:
        with pytest.raises(ConfigValidationError, match="strictly increasing"):
            BreakpointTable({"a": 200, "b": 100})

    def test_rejects_non_integer(self) -> None:
        with pytest.raises(ConfigValidationError, match="positive integer"):
            BreakpointTable({"a": 1.5})  # type: ignore[dict-item]

    def test_equality_and_hash(self) -> None:
        a = BreakpointTable({"a": 100, "b": 200})
        b = BreakpointTable({"a": 100, "b": 200})
        assert a == b
        assert hash(a) == hash(b)

    def test_from_config(self) -> None:
        config = SizesetConfig(_env_file=None, breakpoints={"s": 400, "l": 1200})  # type: ignore[call-arg]
        table = BreakpointTable.from_config(config)
        assert dict(table) == {"s": 400, "l": 1200}
