"""Utility helpers for spectrum analysis."""

from __future__ import annotations

import math

import numpy as np

EPS = 1e-12


def dbfs(x: np.ndarray) -> np.ndarray:
    """Convert a linear magnitude array into dBFS."""
    return 20.0 * np.log10(np.maximum(x, EPS))


def hann_window(n: int, normalise: bool = False) -> np.ndarray:
    """Return a periodic Hann window of length ``n``.

    With ``normalise`` the window is scaled to unit mean so a full-scale tone
    keeps the same magnitude as it would without windowing.
    """
    win = 0.5 - 0.5 * np.cos(2.0 * np.pi * np.arange(n) / n)
    if normalise and n > 0:
        win *= n / np.sum(win)
    return win


def round_half_up(x: float) -> int:
    """Round ``x`` to the nearest integer, halves away from zero."""
    return int(math.copysign(math.floor(abs(x) + 0.5), x))


def is_power_of_two(n: int) -> bool:
    return n > 0 and (n & (n - 1)) == 0


__all__ = ["EPS", "dbfs", "hann_window", "round_half_up", "is_power_of_two"]
