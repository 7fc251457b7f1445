"""Matplotlib window that draws the analyzer's bars at a fixed refresh rate."""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple

import matplotlib.pyplot as plt
from matplotlib.patches import Rectangle

from spectrum_bars.analyzer import SpectrumAnalyzer
from spectrum_bars.audio import AudioSource
from spectrum_bars.config import ConfigurationError
from spectrum_bars.renderer import bar_geometry


class BarVisualizer:
    """Interactive matplotlib bar spectrum.

    The axes span the whole figure in pixel units with y pointing down, so the
    heights produced by the renderer are used as rectangle tops directly.
    """

    def __init__(
        self, analyzer: SpectrumAnalyzer, source: Optional[AudioSource] = None
    ) -> None:
        self.analyzer = analyzer
        self.source = source
        self.paused = False
        self.timer = None

        self.fig = plt.figure(figsize=(7, 5), facecolor="black")
        self.ax = self.fig.add_axes((0.0, 0.0, 1.0, 1.0))
        self.ax.set_facecolor("black")
        self.ax.set_axis_off()
        self.rects: List[Rectangle] = []
        self.width, self.height = self.fig.canvas.get_width_height()
        self._update_limits()
        self._build_rects()

        self.fig.canvas.mpl_connect("key_press_event", self.on_key)
        self.fig.canvas.mpl_connect("resize_event", self.on_resize)

    # ------------------------------------------------------------------
    # Event handlers & UI updates
    # ------------------------------------------------------------------
    def _set_title(self) -> None:
        config = self.analyzer.config
        state = "  [paused]" if self.paused else ""
        manager = self.fig.canvas.manager
        if manager is not None:
            manager.set_window_title(
                f"Spectrum  |  {len(self.analyzer.table)} bars  |  stride {config.group_stride}{state}"
            )

    def _update_limits(self) -> None:
        self.ax.set_xlim(0, self.width)
        self.ax.set_ylim(self.height, 0)

    def _build_rects(self) -> None:
        for rect in self.rects:
            rect.remove()
        self.rects = []
        count = len(self.analyzer.table)
        spacing = self.analyzer.config.bar_spacing
        for position in range(count):
            x, w = bar_geometry(position, count, self.width, spacing)
            rect = Rectangle((x, self.height), w, 0.0, color="white")
            self.ax.add_patch(rect)
            self.rects.append(rect)

    def on_key(self, event) -> None:
        if event.key in ("q", "escape"):
            plt.close(self.fig)
        elif event.key == "p":
            self.paused = not self.paused
            self._set_title()
        elif event.key == "-":
            self._change_stride(-1)
        elif event.key in ("=", "+"):
            self._change_stride(1)

    def on_resize(self, event) -> None:
        self.width, self.height = event.width, event.height
        self._update_limits()
        self._build_rects()
        self.fig.canvas.draw_idle()

    def _change_stride(self, delta: int) -> None:
        config = self.analyzer.config
        stride = max(1, config.group_stride + delta)
        if stride == config.group_stride:
            return
        try:
            self.analyzer.reconfigure(config.replace(group_stride=stride))
        except ConfigurationError:
            return
        self._build_rects()
        self._set_title()
        self.fig.canvas.draw_idle()

    def draw(self, heights: List[Tuple[int, float]], width: float, height: float) -> None:
        if len(heights) != len(self.rects):
            return
        for position, top in heights:
            rect = self.rects[position]
            rect.set_y(top)
            rect.set_height(height - top)
        self.fig.canvas.draw_idle()

    # ------------------------------------------------------------------
    # Main loop
    # ------------------------------------------------------------------
    def _on_timer(self) -> None:
        if self.paused:
            return
        self.analyzer.render_frame(self.width, self.height, self.draw)

    def start(self) -> None:
        interval = max(1, int(round(1000.0 / self.analyzer.config.refresh_hz)))
        self.timer = self.fig.canvas.new_timer(interval=interval)
        self.timer.add_callback(self._on_timer)
        self.timer.start()
        logging.debug("Render timer started at %d ms", interval)

    def stop(self) -> None:
        if self.timer is not None:
            self.timer.stop()
            self.timer = None

    def run(self) -> None:
        if self.source is not None:
            self.analyzer.set_sample_rate(self.source.samplerate)
            self.source.start(self.analyzer.push_block)
            self.analyzer.set_sample_rate(self.source.samplerate)
            self._build_rects()
        self._set_title()
        try:
            self.start()
            plt.show()
        finally:
            self.stop()
            if self.source is not None:
                self.source.stop()


__all__ = ["BarVisualizer"]
