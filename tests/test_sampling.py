import numpy as np
import pytest

from processing.sampling import (
    CaptureWindow,
    capture_windows,
    display_signal,
    nearest_time_index,
    representative_frequencies,
    sample_tones,
)
from radar.errors import InvalidInput
from radar.scene import RadarConfig, Target


def test_one_window_per_chirp_aligned_to_chirp_end():
    cfg = RadarConfig(chirp_durations=(40e-6, 60e-6), sampling_frequency=20e6, sampling_duration=20e-6)

    windows = capture_windows(cfg)

    assert [w.index for w in windows] == [0, 1]
    assert windows[0].start_time == pytest.approx(20e-6)
    assert windows[1].start_time == pytest.approx(80e-6)
    assert all(w.sample_count == 400 for w in windows)
    assert all(w.duration == pytest.approx(20e-6) for w in windows)


def test_window_longer_than_chirp_starts_at_chirp_start():
    cfg = RadarConfig(chirp_durations=(20e-6, 60e-6), sampling_duration=30e-6)

    windows = capture_windows(cfg)

    assert windows[0].start_time == pytest.approx(0.0)
    assert windows[1].start_time == pytest.approx(50e-6)


def test_window_sample_times_step_by_one_over_fs():
    w = CaptureWindow(index=0, start_time=1e-6, duration=10e-6, sample_count=200, sampling_frequency=20e6)
    t = w.sample_times

    assert t.shape == (200,)
    assert t[0] == pytest.approx(1e-6)
    np.testing.assert_allclose(np.diff(t), 5e-8)


def test_non_integer_window_keeps_sample_spacing():
    # 1.23 us at 10 MHz rounds to 12 samples; spacing must still be 1/fs
    cfg = RadarConfig(chirp_durations=(40e-6,), sampling_frequency=1e7, sampling_duration=1.23e-6)

    (w,) = capture_windows(cfg)
    t = w.sample_times

    assert w.sample_count == 12
    assert t.shape == (12,)
    np.testing.assert_allclose(np.diff(t), 1e-7)


def test_nearest_time_index():
    grid = np.array([0.0, 1.0, 2.0, 3.0])

    assert nearest_time_index(grid, 1.6) == 2
    assert nearest_time_index(grid, -5.0) == 0
    assert nearest_time_index(grid, 99.0) == 3
    # exact tie: first match wins
    assert nearest_time_index(grid, 0.5) == 0


def test_nearest_time_index_empty_grid():
    with pytest.raises(InvalidInput):
        nearest_time_index(np.array([]), 0.0)


def test_sample_tones_sums_unit_sines():
    t = np.linspace(0.0, 1e-3, 101)

    out = sample_tones(t, [1e3, 2.5e3])

    np.testing.assert_allclose(out, np.sin(2 * np.pi * 1e3 * t) + np.sin(2 * np.pi * 2.5e3 * t))


def test_sample_tones_without_frequencies_is_silent():
    t = np.linspace(0.0, 1.0, 50)
    np.testing.assert_array_equal(sample_tones(t, []), np.zeros(50))


def test_representative_frequencies_skip_disabled_targets():
    grid = np.array([0.0, 1.0, 2.0])
    beat_map = {
        "on": np.array([10.0, 20.0, 30.0]),
        "off": np.array([1.0, 2.0, 3.0]),
    }
    targets = [
        Target(name="on", range=1.0, velocity=0.0, enabled=True),
        Target(name="off", range=1.0, velocity=0.0, enabled=False),
    ]

    freqs = representative_frequencies(targets, beat_map, grid, at_time=1.2)

    assert freqs == {"on": 20.0}


def test_display_signal_fixed_resolution():
    t, amp = display_signal(0.0, 10e-6, [1e6], num_points=321)

    assert t.shape == amp.shape == (321,)
    assert t[-1] == pytest.approx(10e-6)
