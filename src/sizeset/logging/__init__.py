"""Diagnostic logging subsystem for sizeset.

Provides immutable per-resolution records and a configurable logger
that supports none/summary/full verbosity and in-memory diagnostic mode.
"""

from sizeset.logging.logger import ResolutionLogger
from sizeset.logging.types import ResolutionRecord

__all__ = [
    "ResolutionLogger",
    "ResolutionRecord",
]
