"""Per-step wall clock timing for a run."""

from __future__ import annotations

import time

from logs import get_logger

logger = get_logger("timing")


class StepTimer:
    """Measure elapsed time between consecutive steps of a run.

    Every call to :meth:`mark` closes the current interval. Nothing is logged
    unless the timer is enabled, but intervals are always tracked so callers
    can inspect :attr:`steps`.
    """

    def __init__(self, enabled: bool, name: str = "basic") -> None:
        self.enabled = enabled
        self.name = name
        self._start_ns = time.perf_counter_ns()
        self._interval_start_ns = self._start_ns
        self.steps: list[tuple[str | None, int]] = []

    def mark(self, step: str | None = None) -> int:
        """Close the current interval and return its length in milliseconds."""
        now = time.perf_counter_ns()
        interval_ms = (now - self._interval_start_ns) // 1_000_000
        total_ms = (now - self._start_ns) // 1_000_000
        self._interval_start_ns = now
        self.steps.append((step, interval_ms))
        if self.enabled:
            label = f"'{step}'" if step is not None else "Previous step"
            logger.info(
                "Timer %s - %s took %d ms, with total time lapsed of %d ms.",
                self.name,
                label,
                interval_ms,
                total_ms,
            )
        return interval_ms


__all__ = ["StepTimer"]
