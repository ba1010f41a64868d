"""Sizing subsystem for sizeset.

Parses breakpoint-aware sizing descriptors, resolves them into sorted
candidates against a breakpoint table, and synthesizes the ``sizes`` and
``srcset`` attribute values.
"""

from sizeset.sizing.parser import parse_descriptor
from sizeset.sizing.resolver import CandidateResolver
from sizeset.sizing.synthesizer import (
    build_media_sizes,
    build_source_candidates,
    default_candidate,
    format_srcset,
)
from sizeset.sizing.types import AspectRatio, Candidate, SizeToken, SourceCandidate

__all__ = [
    "AspectRatio",
    "Candidate",
    "CandidateResolver",
    "SizeToken",
    "SourceCandidate",
    "build_media_sizes",
    "build_source_candidates",
    "default_candidate",
    "format_srcset",
    "parse_descriptor",
]
