"""Windowed FFT magnitudes for captured analysis frames."""

from __future__ import annotations

from typing import Optional

import numpy as np

from spectrum_bars.ingest import SampleIngestor
from spectrum_bars.utils import hann_window


class SpectrumEngine:
    """Turn a ready analysis frame into a magnitude spectrum.

    The working buffer holds ``2 * window_size`` reals and is rewritten in place
    on every call. After :meth:`analyze` the first ``window_size // 2`` entries
    are the magnitudes of bins ``0 .. N/2 - 1``; index 0 is DC.
    """

    def __init__(self, window_size: int) -> None:
        self.window_size = int(window_size)
        self.window = hann_window(self.window_size, normalise=True)
        self.buffer = np.zeros(2 * self.window_size, dtype=np.float64)
        self.frames_analyzed = 0

    @property
    def magnitudes(self) -> np.ndarray:
        return self.buffer[: self.window_size // 2]

    def analyze(self, ingestor: SampleIngestor) -> Optional[np.ndarray]:
        """Consume the pending frame from ``ingestor``.

        Returns the working buffer, or ``None`` when no frame was ready, in
        which case the buffer keeps the previous spectrum.
        """
        if ingestor.window_size != self.window_size:
            raise ValueError(
                f"ingestor window {ingestor.window_size} does not match "
                f"engine window {self.window_size}"
            )
        n = self.window_size
        if not ingestor.take(self.buffer[:n]):
            return None
        self.buffer[n:] = 0.0
        self.buffer[:n] *= self.window
        spectrum = np.abs(np.fft.rfft(self.buffer[:n]))
        self.buffer[: spectrum.shape[0]] = spectrum
        self.frames_analyzed += 1
        return self.buffer


__all__ = ["SpectrumEngine"]
