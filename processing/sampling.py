# processing/sampling.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Sequence

import numpy as np

from radar.errors import InvalidInput
from radar.scene import RadarConfig, Target


@dataclass(frozen=True)
class CaptureWindow:
    index: int            # chirp segment this window belongs to
    start_time: float     # s
    duration: float       # s
    sample_count: int
    sampling_frequency: float   # Hz

    @property
    def sample_times(self) -> np.ndarray:
        # spaced by 1/fs even when duration * fs is not an integer
        return self.start_time + np.arange(self.sample_count) / self.sampling_frequency


def capture_windows(config: RadarConfig) -> List[CaptureWindow]:
    """
    One capture window per chirp segment.

    The window is right-aligned with the end of its chirp so the
    round-trip delay transient at the start of the ramp is skipped. If
    the sampling duration exceeds the chirp, it starts at the chirp start.
    """
    windows = []
    for i, (start, duration) in enumerate(zip(config.chirp_starts, config.chirp_durations)):
        offset = max(0.0, duration - config.sampling_duration)
        windows.append(CaptureWindow(
            index=i,
            start_time=float(start + offset),
            duration=float(config.sampling_duration),
            sample_count=config.sample_count,
            sampling_frequency=float(config.sampling_frequency),
        ))
    return windows


def nearest_time_index(t_grid: np.ndarray, t: float) -> int:
    """
    Index of the grid time closest to t.

    Ties go to the first match (np.argmin returns the lowest index).
    """
    t_grid = np.asarray(t_grid, dtype=float)
    if t_grid.size == 0:
        raise InvalidInput("cannot look up a time in an empty grid")
    return int(np.argmin(np.abs(t_grid - t)))


def sample_tones(t_grid: np.ndarray, frequencies: Iterable[float]) -> np.ndarray:
    """
    Sum of unit sinusoids sin(2*pi*f*t) evaluated on t_grid.

    No windowing and no normalization. An empty frequency list gives
    an all-zero signal.
    """
    t_grid = np.asarray(t_grid, dtype=float)
    freqs = np.asarray(list(frequencies), dtype=float)

    signal = np.zeros_like(t_grid)
    for f in freqs:
        signal += np.sin(2.0 * np.pi * f * t_grid)
    return signal


def representative_frequencies(
    targets: Sequence[Target],
    beat_map: Dict[str, np.ndarray],
    t_grid: np.ndarray,
    at_time: float,
) -> Dict[str, float]:
    """
    Beat frequency of every enabled target at the grid time nearest `at_time`.
    """
    idx = nearest_time_index(t_grid, at_time)
    return {
        tgt.name: float(beat_map[tgt.name][idx])
        for tgt in targets
        if tgt.enabled
    }


def display_signal(
    start_time: float,
    duration: float,
    frequencies: Iterable[float],
    num_points: int = 500,
) -> tuple[np.ndarray, np.ndarray]:
    """
    Fixed-resolution render of a sum of tones over an arbitrary span.
    Meant for plotting only; the spectrum is fed from CaptureWindow.sample_times.
    """
    times = np.linspace(start_time, start_time + duration, int(num_points))
    return times, sample_tones(times, frequencies)
