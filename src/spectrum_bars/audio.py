"""Audio sources that feed samples into the analyzer from a capture context."""
from __future__ import annotations

import threading
import time
from typing import Callable, Optional

import numpy as np

try:  # Optional dependency
    import sounddevice as sd
except Exception:  # pragma: no cover - optional dependency may be absent in CI
    sd = None  # type: ignore[assignment]

SampleSink = Callable[[np.ndarray], None]


def downmix(indata: np.ndarray) -> np.ndarray:
    """Reduce a ``(frames, channels)`` block to one channel by averaging."""
    if indata.ndim == 2 and indata.shape[1] > 1:
        return indata.mean(axis=1)
    return indata[:, 0] if indata.ndim == 2 else indata


class AudioSource:
    """Abstract push-style audio stream interface."""

    samplerate: float

    def start(self, sink: SampleSink) -> None:  # pragma: no cover - interface method
        raise NotImplementedError

    def stop(self) -> None:  # pragma: no cover - interface method
        raise NotImplementedError


class MicSource(AudioSource):
    """Audio source backed by a sounddevice input stream."""

    def __init__(
        self,
        samplerate: Optional[float] = None,
        blocksize: int = 512,
        device: Optional[str] = None,
    ) -> None:
        if sd is None:
            raise RuntimeError("sounddevice is not available. Install it or use --demo.")

        if samplerate is None:
            info = sd.query_devices(device, "input")
            samplerate = float(info["default_samplerate"])
        self.samplerate = float(samplerate)
        self.blocksize = blocksize
        self.device = device
        self.stream = None
        self._sink: Optional[SampleSink] = None

    def _callback(self, indata, frames, time_info, status):  # pragma: no cover - sounddevice callback
        if self._sink is not None:
            self._sink(downmix(indata))

    def start(self, sink: SampleSink) -> None:
        if sd is None:  # pragma: no cover - defensive
            raise RuntimeError("sounddevice is not available.")
        self._sink = sink
        self.stream = sd.InputStream(
            channels=1,
            samplerate=self.samplerate,
            blocksize=self.blocksize,
            device=self.device,
            callback=self._callback,
            dtype="float32",
        )
        self.stream.start()
        self.samplerate = float(self.stream.samplerate)

    def stop(self) -> None:
        self._sink = None
        if self.stream is not None:
            try:  # pragma: no cover - depends on audio backend
                self.stream.stop()
                self.stream.close()
            finally:
                self.stream = None


class DemoSource(AudioSource):
    """Synthetic audio source used when no microphone is available.

    A background thread generates ``blocksize`` samples at a time and paces
    itself to real time.
    """

    def __init__(self, samplerate: float = 44100.0, blocksize: int = 512) -> None:
        self.samplerate = float(samplerate)
        self.blocksize = blocksize
        self.t = 0
        self._stopped = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def generate(self) -> np.ndarray:
        n = self.blocksize
        sr = self.samplerate
        t = (self.t + np.arange(n)) / sr
        # a slow sweep that wraps every 20 seconds
        sweep_t = np.mod(t, 20.0)
        chirp = np.sin(2 * np.pi * (100 + (sweep_t * 0.5e3)) * sweep_t) * 0.4
        tone1 = 0.25 * np.sin(2 * np.pi * 440 * t)
        tone2 = 0.2 * np.sin(2 * np.pi * 880 * t + 0.3)
        noise = 0.02 * np.random.randn(n)
        y = chirp + tone1 + tone2 + noise
        self.t += n
        y = np.tanh(1.5 * y)
        return y.astype(np.float32)

    def _run(self, sink: SampleSink) -> None:
        period = self.blocksize / self.samplerate
        next_tick = time.monotonic()
        while not self._stopped.is_set():
            sink(self.generate())
            next_tick += period
            delay = next_tick - time.monotonic()
            if delay > 0:
                self._stopped.wait(delay)

    def start(self, sink: SampleSink) -> None:
        self._stopped.clear()
        self._thread = threading.Thread(target=self._run, args=(sink,), daemon=True)
        self._thread.start()

    def stop(self) -> None:
        self._stopped.set()
        if self._thread is not None:
            self._thread.join(timeout=1.0)
            self._thread = None


__all__ = ["AudioSource", "DemoSource", "MicSource", "downmix", "sd"]
