# processing/pipeline.py

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Tuple

import numpy as np

from processing.ambiguity import AmbiguityLine, project_ambiguity_lines
from processing.detection import Peak, detect_spectrum_peaks
from processing.fft_processing import Spectrum, magnitude_spectrum
from processing.sampling import (
    CaptureWindow,
    capture_windows,
    display_signal,
    representative_frequencies,
    sample_tones,
)
from radar.beat import beat_series_map
from radar.scene import (
    VELOCITY_SEARCH_BOUNDS,
    Scene,
    validate_scene,
    validate_velocity_bounds,
)
from radar.waveform import time_grid, transmit_timeline

from diagnostics.metrics import (
    MetricsRegistry,
    Timer,
    stage_timer,
    PIPELINE_LATENCY,
    PIPELINE_RUNS,
    WINDOWS_PROCESSED,
    PEAKS_DETECTED,
    AMBIGUITY_LINES,
    TARGETS_ENABLED,
    PEAKS_THIS_RUN,
)


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WindowResult:
    window: CaptureWindow
    tone_frequencies: Dict[str, float]   # per enabled target, Hz
    sample_times: np.ndarray
    signal: np.ndarray
    display_times: np.ndarray
    display_amplitude: np.ndarray
    spectrum: Spectrum
    peaks: List[Peak]
    ambiguity_lines: List[AmbiguityLine]


@dataclass(frozen=True)
class PipelineResult:
    time_grid: np.ndarray
    transmit_frequency: np.ndarray
    beat_series: Dict[str, np.ndarray]    # keyed by target name
    windows: List[WindowResult]

    @property
    def ambiguity_lines(self) -> List[AmbiguityLine]:
        return [line for w in self.windows for line in w.ambiguity_lines]


def run_pipeline(
    scene: Scene,
    grid_points: int = 2000,
    timeline_periods: int = 2,
    display_points: int = 500,
    velocity_bounds: Tuple[float, float] = VELOCITY_SEARCH_BOUNDS,
    *,
    metrics: MetricsRegistry | None = None,
) -> PipelineResult:
    """
    Full FMCW processing chain for one scene.

    Steps:
        1. Transmit frequency timeline on the master grid
        2. Beat series per target
        3. Per capture window: sample enabled targets' beat tones
        4. One-sided magnitude spectrum
        5. Local-contrast peak detection
        6. Ambiguity-line projection per peak

    Pure function of its inputs: nothing is cached between calls.

    Optional:
        - metrics: records total and per-stage latency plus counts

    Raises:
        InvalidConfig: scene or velocity bounds fail validation (before
            any computation)
    """
    validate_scene(scene)
    validate_velocity_bounds(velocity_bounds)

    with Timer(metrics, PIPELINE_LATENCY):
        result = _run_pipeline_core(
            scene,
            grid_points=grid_points,
            timeline_periods=timeline_periods,
            display_points=display_points,
            velocity_bounds=velocity_bounds,
            metrics=metrics,
        )

    num_peaks = sum(len(w.peaks) for w in result.windows)
    num_lines = len(result.ambiguity_lines)

    if metrics is not None:
        metrics.inc(PIPELINE_RUNS, 1)
        metrics.inc(WINDOWS_PROCESSED, len(result.windows))
        metrics.inc(PEAKS_DETECTED, num_peaks)
        metrics.inc(AMBIGUITY_LINES, num_lines)
        metrics.set_gauge(TARGETS_ENABLED, len(scene.enabled_targets))
        metrics.set_gauge(PEAKS_THIS_RUN, num_peaks)

    logger.debug(
        "pipeline: %d windows, %d enabled targets, %d peaks, %d lines",
        len(result.windows), len(scene.enabled_targets), num_peaks, num_lines,
    )

    return result


def _run_pipeline_core(
    scene: Scene,
    grid_points: int,
    timeline_periods: int,
    display_points: int,
    velocity_bounds: Tuple[float, float],
    metrics: MetricsRegistry | None,
) -> PipelineResult:
    cfg = scene.config

    # Step 1: Transmitted frequency timeline
    with stage_timer(metrics, "waveform"):
        t_grid, f_grid = transmit_timeline(cfg, time_grid(cfg, grid_points, timeline_periods))

    # Step 2: Beat series (all targets, enabled or not)
    with stage_timer(metrics, "beat"):
        beat_map = beat_series_map(scene, t_grid, f_grid)

    windows = []
    for window in capture_windows(cfg):
        # Step 3: Sample enabled targets at their representative beat tones
        with stage_timer(metrics, "sampling"):
            tones = representative_frequencies(scene.targets, beat_map, t_grid, window.start_time)
            sample_times = window.sample_times
            signal = sample_tones(sample_times, tones.values())
            display_times, display_amplitude = display_signal(
                window.start_time, window.duration, tones.values(), num_points=display_points
            )

        # Step 4: Spectrum
        with stage_timer(metrics, "spectrum"):
            spectrum = magnitude_spectrum(signal, cfg.sampling_frequency)

        # Step 5: Peaks
        with stage_timer(metrics, "peaks"):
            peaks = detect_spectrum_peaks(spectrum)

        # Step 6: Ambiguity lines
        with stage_timer(metrics, "ambiguity"):
            lines = project_ambiguity_lines(
                window, peaks, cfg, t_grid, f_grid, velocity_bounds=velocity_bounds
            )

        windows.append(WindowResult(
            window=window,
            tone_frequencies=tones,
            sample_times=sample_times,
            signal=signal,
            display_times=display_times,
            display_amplitude=display_amplitude,
            spectrum=spectrum,
            peaks=peaks,
            ambiguity_lines=lines,
        ))

    return PipelineResult(
        time_grid=t_grid,
        transmit_frequency=f_grid,
        beat_series=beat_map,
        windows=windows,
    )


def strongest_line(window_result: WindowResult) -> AmbiguityLine | None:
    """Ambiguity line of the highest-magnitude peak in a window, if any."""
    if not window_result.peaks:
        return None
    best = int(np.argmax([p.magnitude for p in window_result.peaks]))
    return window_result.ambiguity_lines[best]
