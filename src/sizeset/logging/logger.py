"""Diagnostic logger for image resolutions.

Uses the standard ``logging`` module with the ``"sizeset"`` logger.
Supports three verbosity levels and an in-memory diagnostic mode for
post-hoc analysis.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from sizeset.config import SizesetConfig
    from sizeset.logging.types import ResolutionRecord

logger = logging.getLogger("sizeset")


class ResolutionLogger:
    """Per-resolution diagnostic logger.

    Log levels:
        ``"none"``: No logging output. Records are still stored if
        ``diagnostic_mode=True``.

        ``"summary"``: One line per resolution with the key outcome
        (source, candidate count, sizes, default URL, timing).

        ``"full"``: Full JSON dump of all record fields.
    """

    def __init__(self, config: SizesetConfig) -> None:
        self._log_level = config.log_level
        self._diagnostic_mode = config.diagnostic_mode
        self._records: list[ResolutionRecord] = []

    def log_resolution(
        self,
        record: ResolutionRecord,
        log_level: str | None = None,
        diagnostic_mode: bool | None = None,
    ) -> None:
        """Log a single resolution.

        Args:
            record: Immutable record of the resolution.
            log_level: Per-image verbosity, defaults to the configured level.
            diagnostic_mode: Per-image record retention, defaults to the
                configured mode.
        """
        keep = self._diagnostic_mode if diagnostic_mode is None else diagnostic_mode
        if keep:
            self._records.append(record)

        level = log_level or self._log_level
        if level == "none":
            return

        if level == "summary":
            logger.info(
                "resolved %s src=%s provider=%s candidates=%d sizes=%s default=%s%s%s time=%.3fms",
                record.kind,
                record.src,
                record.provider,
                record.num_candidates,
                record.media_sizes,
                record.default_url,
                " [DEGENERATE]" if record.degenerate else "",
                " [PASSTHROUGH]" if record.passthrough else "",
                record.resolve_ms,
            )
        elif level == "full":
            logger.info("resolution_record: %s", json.dumps(asdict(record), default=str))

    def get_diagnostic_data(self) -> list[ResolutionRecord]:
        """Return all stored records (requires ``diagnostic_mode=True``)."""
        return list(self._records)

    def get_summary_stats(self) -> dict[str, Any]:
        """Compute summary statistics over all stored records.

        Returns:
            Dictionary with aggregate stats, or empty dict if no records.
        """
        if not self._records:
            return {}

        n = len(self._records)
        times = [r.resolve_ms for r in self._records]
        degenerate_count = sum(1 for r in self._records if r.degenerate)
        return {
            "total_resolutions": n,
            "mean_candidates": sum(r.num_candidates for r in self._records) / n,
            "mean_resolve_ms": sum(times) / n,
            "max_resolve_ms": max(times),
            "degenerate_count": degenerate_count,
            "degenerate_rate": degenerate_count / n,
            "passthrough_count": sum(1 for r in self._records if r.passthrough),
        }
