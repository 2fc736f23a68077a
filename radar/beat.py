# radar/beat.py

import numpy as np
from typing import Dict, Sequence

from radar.errors import NumericDegeneracy
from radar.scene import SPEED_OF_LIGHT, Scene, Target
from radar.waveform import frequency_at


def doppler_shift(f, v):
    """
    Doppler contribution to the beat frequency.

        doppler(f, v) = f * ((c - v) / (c + v) - 1)

    Positive v (receding) gives a negative shift.

    Raises:
        NumericDegeneracy: if any v <= -c
    """
    f = np.asarray(f, dtype=float)
    v = np.asarray(v, dtype=float)
    c = SPEED_OF_LIGHT

    if np.any(c + v <= 0.0):
        raise NumericDegeneracy(f"velocity at or beyond -c ({-c:g} m/s) has no Doppler shift")

    shift = f * ((c - v) / (c + v) - 1.0)
    if np.ndim(shift) == 0:
        return float(shift)
    return shift


def round_trip_delay(range_m: float) -> float:
    return 2.0 * range_m / SPEED_OF_LIGHT


def beat_series(
    t_grid: np.ndarray,
    f_grid: np.ndarray,
    target: Target,
    carrier_frequency: float,
    bandwidth: float,
    chirp_durations: Sequence[float],
) -> np.ndarray:
    """
    Beat frequency of one target at every grid time.

    The echo is the transmitted sawtooth delayed by the round trip, so
    the range term is f(t - tau) - f(t). The Doppler term is evaluated
    at the instantaneous transmit frequency f(t).

    Parameters:
        t_grid: master time grid (s)
        f_grid: transmitted frequency at each grid time (Hz)

    Returns:
        beat frequency (Hz), shape == t_grid.shape
    """
    t_grid = np.asarray(t_grid, dtype=float)
    f_grid = np.asarray(f_grid, dtype=float)

    tau = round_trip_delay(target.range)
    f_delayed = frequency_at(t_grid - tau, chirp_durations, carrier_frequency, bandwidth)
    range_offset = np.asarray(f_delayed, dtype=float) - f_grid

    return doppler_shift(f_grid, target.velocity) + range_offset


def beat_series_map(scene: Scene, t_grid: np.ndarray, f_grid: np.ndarray) -> Dict[str, np.ndarray]:
    """
    Beat series for every target in the scene, keyed by target name.

    Disabled targets are included; the sampler decides who contributes.
    """
    cfg = scene.config
    return {
        tgt.name: beat_series(
            t_grid,
            f_grid,
            tgt,
            cfg.carrier_frequency,
            cfg.bandwidth,
            cfg.chirp_durations,
        )
        for tgt in scene.targets
    }
