# processing/ambiguity.py

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence, Tuple

import numpy as np

from processing.detection import Peak
from processing.sampling import CaptureWindow, nearest_time_index
from radar.beat import doppler_shift
from radar.scene import (
    SPEED_OF_LIGHT,
    VELOCITY_SEARCH_BOUNDS,
    RadarConfig,
    validate_velocity_bounds,
)


@dataclass(frozen=True)
class AmbiguityLine:
    """
    Segment in the (range, velocity) plane holding every hypothesis that
    explains one measured beat frequency under one chirp slope.
    """
    start: Tuple[float, float]   # (range m, velocity m/s) at v_min
    end: Tuple[float, float]     # (range m, velocity m/s) at v_max
    beat_frequency: float        # Hz
    window_index: int

    def distance_to(self, range_m: float, velocity: float) -> float:
        """Closest approach of the segment to a (range, velocity) point."""
        p = np.array([range_m, velocity], dtype=float)
        a = np.array(self.start, dtype=float)
        b = np.array(self.end, dtype=float)
        ab = b - a
        denom = float(ab @ ab)
        if denom == 0.0:
            return float(np.linalg.norm(p - a))
        u = float(np.clip((p - a) @ ab / denom, 0.0, 1.0))
        return float(np.linalg.norm(p - (a + u * ab)))


def range_hypothesis(
    beat_frequency: float,
    velocity: float,
    f0: float,
    chirp_duration: float,
    bandwidth: float,
) -> float:
    """
    Range that explains `beat_frequency` if the target moves at `velocity`.

        range(v) = -(doppler(f0, v) - bf) * T / B / 2 * c
    """
    return -(doppler_shift(f0, velocity) - beat_frequency) * chirp_duration / bandwidth / 2.0 * SPEED_OF_LIGHT


def project_ambiguity_lines(
    window: CaptureWindow,
    peaks: Sequence[Peak],
    config: RadarConfig,
    t_grid: np.ndarray,
    f_grid: np.ndarray,
    velocity_bounds: Tuple[float, float] = VELOCITY_SEARCH_BOUNDS,
) -> List[AmbiguityLine]:
    """
    One ambiguity line per detected peak of a capture window.

    f0 is the transmit frequency at the grid time nearest the window
    start. Endpoints are reported with the velocity sign flipped
    (approaching = positive) to match the beat-frequency sign convention.
    """
    v_min, v_max = validate_velocity_bounds(velocity_bounds)

    f0 = float(np.asarray(f_grid)[nearest_time_index(t_grid, window.start_time)])
    chirp_duration = config.chirp_durations[window.index]

    lines = []
    for peak in peaks:
        bf = peak.frequency
        r_lo = range_hypothesis(bf, v_min, f0, chirp_duration, config.bandwidth)
        r_hi = range_hypothesis(bf, v_max, f0, chirp_duration, config.bandwidth)
        lines.append(AmbiguityLine(
            start=(float(r_lo), -v_min),
            end=(float(r_hi), -v_max),
            beat_frequency=float(bf),
            window_index=window.index,
        ))
    return lines
