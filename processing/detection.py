from dataclasses import dataclass
from typing import List

import numpy as np

from processing.fft_processing import Spectrum


@dataclass(frozen=True)
class Peak:
    index: int
    frequency: float   # Hz
    magnitude: float


def local_baseline(magnitudes: np.ndarray) -> np.ndarray:
    """
    Mean of each sample and the one after it. The last sample has no
    successor and is its own baseline.
    """
    m = np.asarray(magnitudes, dtype=float)
    if m.size == 0:
        return m.copy()
    nxt = np.append(m[1:], m[-1])
    return (m + nxt) / 2.0


def find_peaks(magnitudes: np.ndarray) -> np.ndarray:
    """
    Local-contrast peak detector.

    Single left-to-right scan against a 2-sample forward baseline:
      - while a value is above its baseline, keep the largest one seen
        as the open candidate
      - when a value drops strictly below its baseline, emit the open
        candidate (if any) and close it
      - a candidate still open at the end is emitted

    Parameters:
        magnitudes: 1D magnitude array

    Returns:
        peak indices, ascending, dtype int
    """
    m = np.asarray(magnitudes, dtype=float)
    baseline = local_baseline(m)

    peaks = []
    candidate = None
    candidate_value = 0.0

    for i in range(m.size):
        if m[i] > baseline[i]:
            if candidate is None or m[i] > candidate_value:
                candidate = i
                candidate_value = m[i]
        elif m[i] < baseline[i] and candidate is not None:
            peaks.append(candidate)
            candidate = None

    if candidate is not None:
        peaks.append(candidate)

    return np.array(peaks, dtype=int)


def detect_spectrum_peaks(spectrum: Spectrum) -> List[Peak]:
    """Run find_peaks over a spectrum and attach bin frequency and magnitude."""
    return [
        Peak(
            index=int(i),
            frequency=float(spectrum.frequencies[i]),
            magnitude=float(spectrum.magnitudes[i]),
        )
        for i in find_peaks(spectrum.magnitudes)
    ]
