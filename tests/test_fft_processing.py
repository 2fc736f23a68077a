import numpy as np
import pytest

from processing.fft_processing import magnitude_spectrum
from radar.errors import InvalidInput


@pytest.mark.parametrize("n", [2, 3, 128, 400, 401])
def test_spectrum_length_is_half_the_input(n):
    signal = np.random.default_rng(n).standard_normal(n)

    spectrum = magnitude_spectrum(signal, sampling_rate=1e6)

    assert len(spectrum) == n // 2
    assert spectrum.frequencies.shape == spectrum.magnitudes.shape == (n // 2,)


def test_bin_frequencies_and_resolution():
    spectrum = magnitude_spectrum(np.zeros(400), sampling_rate=20e6)

    assert spectrum.resolution == pytest.approx(50e3)
    assert spectrum.frequencies[0] == 0.0
    assert spectrum.frequencies[10] == pytest.approx(500e3)


def test_bin_aligned_tone_peaks_at_its_bin():
    fs = 1000.0
    n = 200
    k = 17
    t = np.arange(n) / fs
    tone = np.sin(2 * np.pi * (k * fs / n) * t)

    spectrum = magnitude_spectrum(tone, sampling_rate=fs)

    assert int(np.argmax(spectrum.magnitudes)) == k
    # single-sided scaling restores the unit amplitude
    assert spectrum.magnitudes[k] == pytest.approx(1.0, abs=1e-9)


def test_magnitudes_are_non_negative():
    signal = np.random.default_rng(3).standard_normal(256)
    spectrum = magnitude_spectrum(signal, sampling_rate=1.0)
    assert np.all(spectrum.magnitudes >= 0.0)


def test_empty_signal_rejected():
    with pytest.raises(InvalidInput):
        magnitude_spectrum(np.array([]), sampling_rate=1e6)


def test_non_positive_sampling_rate_rejected():
    with pytest.raises(InvalidInput):
        magnitude_spectrum(np.ones(8), sampling_rate=0.0)


def test_multi_dimensional_signal_rejected():
    with pytest.raises(InvalidInput):
        magnitude_spectrum(np.ones((4, 8)), sampling_rate=1e6)
