# diagnostics/metrics.py
from __future__ import annotations

from dataclasses import dataclass
from collections import deque
import time
from typing import Dict, Any


# -----------------------------
# Metric keys
# -----------------------------
PIPELINE_LATENCY = "pipeline_latency_s"
STAGE_LATENCY_PREFIX = "stage_latency_s."
PIPELINE_RUNS = "pipeline_runs_total"
WINDOWS_PROCESSED = "capture_windows_total"
PEAKS_DETECTED = "peaks_detected_total"
AMBIGUITY_LINES = "ambiguity_lines_total"

# last-run values (overwritten every run)
TARGETS_ENABLED = "targets_enabled"
PEAKS_THIS_RUN = "peaks_this_run"

STAGES = ("waveform", "beat", "sampling", "spectrum", "peaks", "ambiguity")


def stage_key(stage: str) -> str:
    return STAGE_LATENCY_PREFIX + stage


@dataclass
class _TimerStats:
    samples: deque  # of float seconds

    def add(self, x: float, maxlen: int):
        self.samples.append(x)
        while len(self.samples) > maxlen:
            self.samples.popleft()

    def summary(self) -> Dict[str, float]:
        if not self.samples:
            return {"count": 0, "mean_s": 0.0, "p95_s": 0.0, "max_s": 0.0, "total_s": 0.0}
        arr = sorted(self.samples)
        n = len(arr)
        total_s = sum(arr)
        return {
            "count": n,
            "mean_s": total_s / n,
            "p95_s": arr[int(0.95 * (n - 1))],
            "max_s": arr[-1],
            "total_s": total_s,
        }


class MetricsRegistry:
    """
    Observability for pipeline runs:
      - counters: monotonically increasing (runs, windows, peaks, lines)
      - gauges: last value (targets enabled, peaks in the last run)
      - timers: sliding-window timings (seconds), one per stage plus the total

    Stage timers accumulate once per call, so a stage that runs once per
    capture window records one sample per window.
    """

    def __init__(self, window_size: int = 200):
        self.window_size = int(window_size)
        self._counters: Dict[str, int] = {}
        self._gauges: Dict[str, float] = {}
        self._timers: Dict[str, _TimerStats] = {}

    def inc(self, key: str, amount: int = 1) -> None:
        self._counters[key] = int(self._counters.get(key, 0)) + int(amount)

    def set_gauge(self, key: str, value: float) -> None:
        self._gauges[key] = float(value)

    def observe(self, key: str, value_s: float) -> None:
        if key not in self._timers:
            self._timers[key] = _TimerStats(samples=deque())
        self._timers[key].add(float(value_s), self.window_size)

    def counter(self, key: str) -> int:
        return int(self._counters.get(key, 0))

    def gauge(self, key: str) -> float:
        return float(self._gauges.get(key, 0.0))

    def reset(self) -> None:
        self._counters.clear()
        self._gauges.clear()
        self._timers.clear()

    def snapshot(self) -> Dict[str, Any]:
        return {
            "counters": dict(self._counters),
            "gauges": dict(self._gauges),
            "timers": {k: v.summary() for k, v in self._timers.items()},
        }


class Timer:
    """Context manager for timing blocks into MetricsRegistry timers (seconds)."""

    def __init__(self, metrics: MetricsRegistry | None, key: str):
        self.metrics = metrics
        self.key = key
        self._t0 = 0.0

    def __enter__(self):
        self._t0 = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc, tb):
        # failed stages are not recorded
        if self.metrics is not None and exc_type is None:
            self.metrics.observe(self.key, time.perf_counter() - self._t0)
        return False


def stage_timer(metrics: MetricsRegistry | None, name: str) -> Timer:
    """Timer that is a no-op when metrics is None."""
    return Timer(metrics, stage_key(name))
