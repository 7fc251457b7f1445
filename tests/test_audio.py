"""Tests for the audio sources that feed the capture path."""

from __future__ import annotations

import sys
import threading
from pathlib import Path

import pytest

np = pytest.importorskip("numpy")

sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

from spectrum_bars.analyzer import SpectrumAnalyzer
from spectrum_bars.audio import DemoSource, downmix
from spectrum_bars.config import AnalyzerConfig


def test_downmix_averages_channels():
    stereo = np.array([[1.0, 3.0], [0.0, -2.0]])
    np.testing.assert_allclose(downmix(stereo), [2.0, -1.0])
    mono = np.array([[0.5], [0.25]])
    np.testing.assert_allclose(downmix(mono), [0.5, 0.25])
    flat = np.array([0.1, 0.2])
    np.testing.assert_allclose(downmix(flat), flat)


def test_demo_blocks_are_bounded():
    source = DemoSource(samplerate=8000.0, blocksize=256)
    block = source.generate()
    assert block.shape == (256,)
    assert block.dtype == np.float32
    assert np.max(np.abs(block)) <= 1.0
    source.generate()
    assert source.t == 512


def test_demo_source_feeds_the_analyzer_until_stopped():
    config = AnalyzerConfig(sample_rate=8000.0, window_size=256, block_size=256)
    analyzer = SpectrumAnalyzer(config)
    source = DemoSource(config.sample_rate, config.block_size)
    got_block = threading.Event()

    def sink(block):
        analyzer.push_block(block)
        got_block.set()

    source.start(sink)
    try:
        assert got_block.wait(timeout=2.0)
    finally:
        source.stop()
    assert source._thread is None
    assert analyzer.render_frame(100.0, 100.0)
