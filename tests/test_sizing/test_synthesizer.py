"""Tests for sizes/srcset synthesis."""

from __future__ import annotations

import pytest

from sizeset.breakpoints import BreakpointTable
from sizeset.config import DEFAULT_BREAKPOINTS
from sizeset.sizing.parser import parse_descriptor
from sizeset.sizing.resolver import CandidateResolver
from sizeset.sizing.synthesizer import (
    build_media_sizes,
    build_source_candidates,
    default_candidate,
    format_srcset,
)
from sizeset.sizing.types import AspectRatio, Candidate, SourceCandidate


def _candidates(descriptor: str, width: int | None = None, height: int | None = None) -> list[Candidate]:
    return CandidateResolver().resolve(
        parse_descriptor(descriptor),
        BreakpointTable(DEFAULT_BREAKPOINTS),
        AspectRatio.from_dimensions(width, height),
    )


def _url(candidate: Candidate) -> str:
    return f"/img/{candidate.width_px}x{candidate.height_px}"


class TestBuildMediaSizes:
    """The sizes attribute string."""

    def test_two_entries(self) -> None:
        assert build_media_sizes(_candidates("500:500,900:900")) == "(max-width: 500px) 500px, 900px"

    def test_named_breakpoints(self) -> None:
        sizes = build_media_sizes(_candidates("xs:100vw sm:100vw md:300px lg:350px xl:350px 2xl:350px"))
        assert sizes == (
            "(max-width: 320px) 100vw, (max-width: 640px) 100vw, (max-width: 768px) 300px, "
            "(max-width: 1024px) 350px, (max-width: 1280px) 350px, 350px"
        )

    def test_single_entry_is_unconditional(self) -> None:
        assert build_media_sizes(_candidates("md:50vw")) == "50vw"

    def test_empty(self) -> None:
        assert build_media_sizes([]) is None

    def test_non_numeric_length_included(self) -> None:
        assert build_media_sizes(_candidates("sm:100vw lg:40rem")) == "(max-width: 640px) 100vw, 40rem"

    @pytest.mark.parametrize(
        "descriptor",
        ["lg:400px sm:100vw md:50vw", "2xl:1000 xs:320 xl:900 sm:100vw", "900:900 500:500 700:700"],
    )
    def test_only_last_entry_unprefixed_and_ascending(self, descriptor: str) -> None:
        entries = build_media_sizes(_candidates(descriptor)).split(", ")  # type: ignore[union-attr]
        assert not entries[-1].startswith("(max-width")
        prefixed = entries[:-1]
        assert all(entry.startswith("(max-width: ") for entry in prefixed)
        thresholds = [int(entry.split("(max-width: ")[1].split("px)")[0]) for entry in prefixed]
        assert thresholds == sorted(thresholds)
        assert len(set(thresholds)) == len(thresholds)


class TestSourceCandidates:
    """srcset entries and the default candidate."""

    def test_entries_follow_candidate_order(self) -> None:
        entries = build_source_candidates(_candidates("500:500,900:900", 200, 200), _url)
        assert entries == [
            SourceCandidate(url="/img/500x500", width_px=500),
            SourceCandidate(url="/img/900x900", width_px=900),
        ]

    def test_duplicate_widths_produce_duplicate_entries(self) -> None:
        entries = build_source_candidates(_candidates("lg:350px xl:350px", 1, 2), _url)
        assert [str(e) for e in entries] == ["/img/350x700 350w", "/img/350x700 350w"]

    def test_non_numeric_lengths_skipped(self) -> None:
        entries = build_source_candidates(_candidates("sm:100vw lg:40rem"), _url)
        assert [e.width_px for e in entries] == [640]

    def test_format_srcset(self) -> None:
        entries = [SourceCandidate("/a.png", 500), SourceCandidate("/b.png", 900)]
        assert format_srcset(entries) == "/a.png 500w, /b.png 900w"

    def test_default_is_terminal(self) -> None:
        anchor = default_candidate(_candidates("900:900 500:500", 200, 200))
        assert anchor is not None
        assert (anchor.width_px, anchor.height_px) == (900, 900)

    def test_default_skips_non_numeric_terminal(self) -> None:
        anchor = default_candidate(_candidates("sm:100vw lg:40rem"))
        assert anchor is not None
        assert anchor.width_px == 640

    def test_default_none_without_widths(self) -> None:
        assert default_candidate(_candidates("lg:40rem")) is None
        assert default_candidate([]) is None
