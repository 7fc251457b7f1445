"""Capture-side sample accumulation and the single-slot frame handoff."""

from __future__ import annotations

import threading

import numpy as np


class SampleIngestor:
    """Collect samples into a fixed window and hand full windows to a consumer.

    The producer (an audio callback) calls :meth:`push` or :meth:`push_block`.
    The consumer (the render tick) calls :meth:`take`. Three preallocated
    buffers rotate between the roles capture window, pending slot and consumer
    copy, so neither side ever reads a buffer the other is writing. The producer
    only ever tries the slot lock without blocking; when the consumer happens
    to hold it, the finished window is dropped instead.

    At most one frame is pending. A window completed while another is still
    pending replaces it, so the consumer always sees the newest audio.
    """

    def __init__(self, window_size: int) -> None:
        self.window_size = int(window_size)
        self._window = np.zeros(self.window_size, dtype=np.float64)
        self._slot = np.zeros(self.window_size, dtype=np.float64)
        self._front = np.zeros(self.window_size, dtype=np.float64)
        self._cursor = 0
        self._ready = False
        self._lock = threading.Lock()
        self.dropped = 0
        self.handed_off = 0

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def ready(self) -> bool:
        return self._ready

    # ------------------------------------------------------------------
    # Capture context
    # ------------------------------------------------------------------
    def push(self, sample: float) -> None:
        self._window[self._cursor] = sample
        self._cursor += 1
        if self._cursor == self.window_size:
            self._hand_off()
            self._cursor = 0

    def push_block(self, samples: np.ndarray) -> None:
        """Equivalent to calling :meth:`push` on each sample in order."""
        data = np.asarray(samples).reshape(-1)
        total = data.shape[0]
        pos = 0
        while pos < total:
            count = min(self.window_size - self._cursor, total - pos)
            end = self._cursor + count
            self._window[self._cursor : end] = data[pos : pos + count]
            self._cursor = end
            pos += count
            if self._cursor == self.window_size:
                self._hand_off()
                self._cursor = 0

    def _hand_off(self) -> None:
        if not self._lock.acquire(blocking=False):
            self.dropped += 1
            return
        try:
            if self._ready:
                # the pending frame was never consumed; its buffer is recycled
                self.dropped += 1
            self._window, self._slot = self._slot, self._window
            self._ready = True
            self.handed_off += 1
        finally:
            self._lock.release()

    # ------------------------------------------------------------------
    # Render context
    # ------------------------------------------------------------------
    def take(self, out: np.ndarray) -> bool:
        """Copy the pending frame into ``out`` and mark it consumed.

        Returns ``False`` and leaves ``out`` untouched when nothing is pending.
        """
        with self._lock:
            if not self._ready:
                return False
            self._slot, self._front = self._front, self._slot
            self._ready = False
        out[: self.window_size] = self._front
        return True


__all__ = ["SampleIngestor"]
