"""Convert FFT magnitudes into pixel heights for each bar."""

from __future__ import annotations

from typing import List, Tuple

import numpy as np

from spectrum_bars.scale import BarTable
from spectrum_bars.utils import dbfs

MIN_DB = -100.0
MAX_DB = 0.0


class LevelRenderer:
    """Map bin magnitudes to the y coordinate of each bar's top edge.

    Levels are decibels relative to the window size (which is what an
    unnormalised FFT of a full-scale tone peaks at), clamped to
    ``[min_db, max_db]``. ``max_db`` lands at y=0, the top of the canvas, and
    ``min_db`` at ``canvas_height``, i.e. no visible bar.
    """

    def __init__(self, min_db: float = MIN_DB, max_db: float = MAX_DB) -> None:
        if not min_db < max_db:
            raise ValueError(f"min_db ({min_db}) must be below max_db ({max_db})")
        self.min_db = float(min_db)
        self.max_db = float(max_db)

    def bin_levels(self, spectrum: np.ndarray, window_size: int) -> np.ndarray:
        mags = np.asarray(spectrum, dtype=np.float64)[: window_size // 2]
        reference = 20.0 * np.log10(float(window_size))
        return np.clip(dbfs(mags) - reference, self.min_db, self.max_db)

    def level_to_height(self, db: float, canvas_height: float) -> float:
        span = self.max_db - self.min_db
        return float(canvas_height) * (self.max_db - float(db)) / span

    def heights(
        self, spectrum: np.ndarray, table: BarTable, canvas_height: float
    ) -> List[Tuple[int, float]]:
        """Return ``(position, height)`` for every bar of ``table``."""
        if len(table) == 0:
            return []
        levels = self.bin_levels(spectrum, table.window_size)
        result: List[Tuple[int, float]] = []
        for bar in table:
            if bar.end_bin:
                # peak hold over the claimed range
                db = float(np.max(levels[bar.bin : bar.end_bin + 1]))
                height = self.level_to_height(db, canvas_height)
            else:
                height = self.level_to_height(levels[bar.bin], canvas_height)
                if bar.factor > 0.0:
                    if bar.bin > 0:
                        prev = self.level_to_height(levels[bar.bin - 1], canvas_height)
                    else:
                        prev = height
                    height = prev + (height - prev) * bar.factor
            result.append((bar.position, height))
        return result


def heights(
    spectrum: np.ndarray, table: BarTable, canvas_height: float
) -> List[Tuple[int, float]]:
    return LevelRenderer().heights(spectrum, table, canvas_height)


def bar_geometry(
    position: int, count: int, canvas_width: float, spacing: float = 0.1
) -> Tuple[float, float]:
    """Return ``(x, width)`` of a bar when ``count`` bars share the canvas.

    ``spacing`` strictly between 0 and 1 is a fraction of the bar slot,
    anything else is a gap in pixels. The gap never leaves less than one pixel
    of bar.
    """
    if count <= 0:
        return 0.0, 0.0
    slot = float(canvas_width) / count
    gap = slot * spacing if 0.0 < spacing < 1.0 else float(spacing)
    gap = max(0.0, min(slot - 1.0, gap))
    return position * slot + gap / 2.0, slot - gap


__all__ = ["LevelRenderer", "MAX_DB", "MIN_DB", "bar_geometry", "heights"]
