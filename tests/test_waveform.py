import numpy as np
import pytest

from radar.errors import InvalidConfig
from radar.scene import RadarConfig
from radar.waveform import frequency_at, time_grid, transmit_timeline, wrap_time


CARRIER = 24e9
BANDWIDTH = 1e9


def test_output_stays_within_sweep():
    rng = np.random.default_rng(0)
    durations = [40e-6, 60e-6, 25e-6]
    t = rng.uniform(-1e-3, 1e-3, size=5000)

    f = frequency_at(t, durations, CARRIER, BANDWIDTH)

    assert np.all(f >= CARRIER)
    assert np.all(f < CARRIER + BANDWIDTH)


@pytest.mark.parametrize("durations, edge", [
    ([40e-6], 40e-6),
    ([40e-6, 60e-6], 40e-6),
    ([40e-6, 60e-6], 100e-6),
])
def test_last_instant_of_a_ramp_stays_below_sweep_top(durations, edge):
    t = np.nextafter(edge, 0.0)

    f = frequency_at(t, durations, CARRIER, BANDWIDTH)
    f_arr = frequency_at(np.array([t]), durations, CARRIER, BANDWIDTH)

    assert CARRIER <= f < CARRIER + BANDWIDTH
    assert f_arr[0] < CARRIER + BANDWIDTH


def test_periodic_over_total_duration():
    rng = np.random.default_rng(1)
    durations = [40e-6, 60e-6]
    total = sum(durations)
    t = rng.uniform(-5e-4, 5e-4, size=2000)

    f0 = frequency_at(t, durations, CARRIER, BANDWIDTH)
    f1 = frequency_at(t + total, durations, CARRIER, BANDWIDTH)

    np.testing.assert_allclose(f0, f1, rtol=0, atol=1.0)


def test_single_chirp_reference_points():
    durations = [40e-6]

    assert frequency_at(0.0, durations, CARRIER, BANDWIDTH) == pytest.approx(CARRIER)
    assert frequency_at(20e-6, durations, CARRIER, BANDWIDTH) == pytest.approx(CARRIER + 0.5 * BANDWIDTH)
    # wraps back to the carrier at the end of the ramp
    assert frequency_at(40e-6, durations, CARRIER, BANDWIDTH) == pytest.approx(CARRIER)


def test_negative_time_lands_in_correct_segment():
    # -10us wraps to 30us, three quarters up the ramp
    f = frequency_at(-10e-6, [40e-6], CARRIER, BANDWIDTH)
    assert f == pytest.approx(CARRIER + 0.75 * BANDWIDTH)

    # with two chirps, -50us wraps to 50us: 10us into the 60us chirp
    f = frequency_at(-50e-6, [40e-6, 60e-6], CARRIER, BANDWIDTH)
    assert f == pytest.approx(CARRIER + BANDWIDTH / 6.0)


def test_second_segment_uses_its_own_duration():
    f = frequency_at(70e-6, [40e-6, 60e-6], CARRIER, BANDWIDTH)
    assert f == pytest.approx(CARRIER + 0.5 * BANDWIDTH)


def test_wrap_time_is_non_negative():
    t = np.array([-1.5, -1.0, -0.25, 0.0, 0.25, 1.0, 2.75])
    wrapped = wrap_time(t, 1.0)

    np.testing.assert_allclose(wrapped, [0.5, 0.0, 0.75, 0.0, 0.25, 0.0, 0.75])


def test_scalar_in_scalar_out():
    f = frequency_at(1e-6, [40e-6], CARRIER, BANDWIDTH)
    assert isinstance(f, float)


def test_rejects_empty_or_zero_durations():
    with pytest.raises(InvalidConfig):
        frequency_at(0.0, [], CARRIER, BANDWIDTH)

    with pytest.raises(InvalidConfig):
        frequency_at(0.0, [0.0], CARRIER, BANDWIDTH)


def test_time_grid_covers_requested_periods():
    cfg = RadarConfig(chirp_durations=(40e-6, 60e-6))
    t = time_grid(cfg, num_points=1000, periods=3)

    assert t.shape == (1000,)
    assert t[0] == 0.0
    assert t[-1] < 3 * 100e-6
    np.testing.assert_allclose(np.diff(t), 300e-6 / 1000)


def test_time_grid_rejects_degenerate_sizes():
    cfg = RadarConfig()
    with pytest.raises(InvalidConfig):
        time_grid(cfg, num_points=1)
    with pytest.raises(InvalidConfig):
        time_grid(cfg, periods=0)


def test_transmit_timeline_matches_frequency_at():
    cfg = RadarConfig()
    t = time_grid(cfg, num_points=200)

    t_out, f_out = transmit_timeline(cfg, t)

    np.testing.assert_array_equal(t_out, t)
    np.testing.assert_array_equal(
        f_out, frequency_at(t, cfg.chirp_durations, cfg.carrier_frequency, cfg.bandwidth)
    )
