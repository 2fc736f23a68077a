# radar/waveform.py

import numpy as np
from typing import Sequence, Tuple

from radar.errors import InvalidConfig
from radar.scene import RadarConfig


def wrap_time(t, total: float) -> np.ndarray:
    """
    Non-negative modulo: maps any real t into [0, total).

    np.fmod keeps the sign of the dividend, so a negative t would land in
    the wrong sawtooth segment unless negative remainders are shifted
    up by one period.
    """
    t = np.asarray(t, dtype=float)
    wrapped = np.fmod(t, total)
    wrapped = np.where(wrapped < 0.0, wrapped + total, wrapped)
    # a tiny negative remainder plus total can round up to total itself
    return np.where(wrapped >= total, 0.0, wrapped)


def frequency_at(
    t,
    chirp_durations: Sequence[float],
    carrier_frequency: float,
    bandwidth: float,
):
    """
    Instantaneous transmitted frequency of a sawtooth chirp sequence.

    Each entry of chirp_durations is one ramp from carrier_frequency up to
    (but excluding) carrier_frequency + bandwidth. The sequence repeats
    with period sum(chirp_durations).

    Parameters:
        t: time in seconds, scalar or array
        chirp_durations: ramp durations in seconds, in transmit order

    Returns:
        frequency in Hz, same shape as t (float for scalar input)

    Raises:
        InvalidConfig: if the total duration is not positive
    """
    durations = np.asarray(chirp_durations, dtype=float)
    total = float(np.sum(durations))
    if durations.size == 0 or total <= 0:
        raise InvalidConfig("sum of chirp_durations must be positive")

    t_wrapped = wrap_time(t, total)

    bounds = np.cumsum(durations)
    starts = np.concatenate(([0.0], bounds[:-1]))

    # first segment whose cumulative upper bound exceeds t_wrapped
    segment = np.searchsorted(bounds, t_wrapped, side="right")
    segment = np.minimum(segment, durations.size - 1)

    fraction = (t_wrapped - starts[segment]) / durations[segment]
    fraction = np.clip(fraction, 0.0, np.nextafter(1.0, 0.0))

    freq = carrier_frequency + fraction * bandwidth
    # carrier + (1 - eps) * bandwidth can still round up to the sweep top
    freq = np.minimum(freq, np.nextafter(carrier_frequency + bandwidth, carrier_frequency))
    if np.ndim(freq) == 0:
        return float(freq)
    return freq


def time_grid(config: RadarConfig, num_points: int = 2000, periods: int = 2) -> np.ndarray:
    """Evenly spaced master time grid over `periods` full chirp sequences."""
    if num_points < 2:
        raise InvalidConfig(f"time grid needs at least 2 points, got {num_points}")
    if periods < 1:
        raise InvalidConfig(f"time grid needs at least one period, got {periods}")
    span = config.total_chirp_duration * periods
    return np.linspace(0.0, span, int(num_points), endpoint=False)


def transmit_timeline(config: RadarConfig, t_grid: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """
    Returns:
        (t_grid, frequency) pair of equal-length arrays
    """
    t_grid = np.asarray(t_grid, dtype=float)
    f_grid = frequency_at(
        t_grid,
        config.chirp_durations,
        config.carrier_frequency,
        config.bandwidth,
    )
    return t_grid, np.asarray(f_grid, dtype=float)
