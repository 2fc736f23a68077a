from dataclasses import dataclass

import numpy as np

from radar.errors import InvalidInput


@dataclass(frozen=True)
class Spectrum:
    frequencies: np.ndarray   # Hz, bin i -> i * sampling_rate / n
    magnitudes: np.ndarray    # single-sided amplitude
    resolution: float         # Hz per bin

    def __len__(self):
        return len(self.magnitudes)


def magnitude_spectrum(signal: np.ndarray, sampling_rate: float) -> Spectrum:
    """
    One-sided amplitude spectrum of a real sampled signal.

    Parameters:
        signal: time-domain samples, length n
        sampling_rate: Hz

    Returns:
        Spectrum with floor(n / 2) bins. A unit-amplitude sinusoid on
        bin k reads magnitude 1.0 at bin k.

    Raises:
        InvalidInput: empty or multi-dimensional signal, non-positive sampling rate
    """
    signal = np.asarray(signal, dtype=float)
    if signal.ndim != 1:
        raise InvalidInput(f"signal must be 1-D, got shape {signal.shape}")
    n = signal.shape[0]
    if n == 0:
        raise InvalidInput("cannot compute the spectrum of an empty signal")
    if sampling_rate <= 0:
        raise InvalidInput(f"sampling_rate must be positive, got {sampling_rate!r}")

    # complex FFT with zero imaginary part
    bins = np.fft.fft(signal.astype(np.complex128))
    half = n // 2

    magnitudes = np.abs(bins[:half]) / n * 2.0
    frequencies = np.arange(half, dtype=float) * sampling_rate / n

    return Spectrum(
        frequencies=frequencies,
        magnitudes=magnitudes,
        resolution=sampling_rate / n,
    )
