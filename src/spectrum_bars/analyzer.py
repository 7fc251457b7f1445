"""Glue between the capture path, the FFT and the bar renderer."""

from __future__ import annotations

import logging
import threading
from typing import Callable, List, Optional, Tuple

import numpy as np

from spectrum_bars.config import AnalyzerConfig, ConfigurationError
from spectrum_bars.engine import SpectrumEngine
from spectrum_bars.ingest import SampleIngestor
from spectrum_bars.renderer import LevelRenderer
from spectrum_bars.scale import BarTable, build_from_config

DrawCallback = Callable[[List[Tuple[int, float]], float, float], None]


class SpectrumAnalyzer:
    """Own the ingestor, engine, renderer and the current bar table.

    ``push``/``push_block`` run on the capture context and only touch the
    ingestor. Everything else belongs to the render context. Reconfiguration
    builds the new table before swapping anything, so a rejected configuration
    leaves the previous one in effect.
    """

    def __init__(self, config: Optional[AnalyzerConfig] = None) -> None:
        if config is None:
            config = AnalyzerConfig()
        config.validate()
        self._render_lock = threading.Lock()
        self.config = config
        self.table: BarTable = build_from_config(config)
        self.ingestor = SampleIngestor(config.window_size)
        self.engine = SpectrumEngine(config.window_size)
        self.renderer = LevelRenderer(config.min_db, config.max_db)
        self.last_heights: List[Tuple[int, float]] = []
        self._reported_drops = 0
        logging.info(
            "Analyzer ready: %d bars, %d-point window at %.0f Hz",
            len(self.table),
            config.window_size,
            config.sample_rate,
        )

    # ------------------------------------------------------------------
    # Capture context
    # ------------------------------------------------------------------
    def push(self, sample: float) -> None:
        self.ingestor.push(sample)

    def push_block(self, samples: np.ndarray) -> None:
        self.ingestor.push_block(samples)

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------
    def reconfigure(self, config: AnalyzerConfig) -> BarTable:
        """Validate ``config``, rebuild the bar table and swap it in."""
        try:
            config.validate()
            table = build_from_config(config)
            renderer = LevelRenderer(config.min_db, config.max_db)
        except ConfigurationError:
            logging.exception("Rejected analyzer configuration %s", config)
            raise

        with self._render_lock:
            if config.window_size != self.config.window_size:
                self.engine = SpectrumEngine(config.window_size)
                self.ingestor = SampleIngestor(config.window_size)
            self.renderer = renderer
            self.table = table
            self.config = config
            self.last_heights = []
            self._reported_drops = 0

        logging.info(
            "Rebuilt bar table: %d bars for %.1f-%.1f Hz (stride %d, %d-point window at %.0f Hz)",
            len(table),
            config.min_freq,
            config.max_freq,
            config.group_stride,
            config.window_size,
            config.sample_rate,
        )
        return table

    def set_sample_rate(self, sample_rate: float) -> BarTable:
        if sample_rate == self.config.sample_rate:
            return self.table
        return self.reconfigure(self.config.replace(sample_rate=float(sample_rate)))

    # ------------------------------------------------------------------
    # Render context
    # ------------------------------------------------------------------
    def render_frame(
        self,
        canvas_width: float,
        canvas_height: float,
        draw: Optional[DrawCallback] = None,
    ) -> bool:
        """Analyze a pending frame, if any, and hand bar heights to ``draw``.

        Returns ``True`` when a new frame was analyzed and drawn.
        """
        with self._render_lock:
            spectrum = self.engine.analyze(self.ingestor)
            if spectrum is None:
                return False
            self.last_heights = self.renderer.heights(
                spectrum, self.table, canvas_height
            )
            heights = self.last_heights
            dropped = self.ingestor.dropped

        if dropped != self._reported_drops:
            logging.debug("Capture dropped %d windows so far", dropped)
            self._reported_drops = dropped
        if draw is not None:
            draw(heights, canvas_width, canvas_height)
        return True


__all__ = ["DrawCallback", "SpectrumAnalyzer"]
