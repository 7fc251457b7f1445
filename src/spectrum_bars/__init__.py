"""Real-time equal-tempered bar spectrum analyzer."""

from __future__ import annotations

from importlib import import_module
from typing import TYPE_CHECKING, Any

__all__ = [
    "AnalyzerConfig",
    "AudioSource",
    "Bar",
    "BarTable",
    "BarVisualizer",
    "ConfigurationError",
    "DemoSource",
    "LevelRenderer",
    "MicSource",
    "SampleIngestor",
    "SpectrumAnalyzer",
    "SpectrumEngine",
    "build_bar_table",
    "tempered_scale",
    "main",
]

_EXPORT_MAP = {
    "AnalyzerConfig": ("spectrum_bars.config", "AnalyzerConfig"),
    "ConfigurationError": ("spectrum_bars.config", "ConfigurationError"),
    "AudioSource": ("spectrum_bars.audio", "AudioSource"),
    "DemoSource": ("spectrum_bars.audio", "DemoSource"),
    "MicSource": ("spectrum_bars.audio", "MicSource"),
    "Bar": ("spectrum_bars.scale", "Bar"),
    "BarTable": ("spectrum_bars.scale", "BarTable"),
    "build_bar_table": ("spectrum_bars.scale", "build_bar_table"),
    "tempered_scale": ("spectrum_bars.scale", "tempered_scale"),
    "BarVisualizer": ("spectrum_bars.visualizer", "BarVisualizer"),
    "LevelRenderer": ("spectrum_bars.renderer", "LevelRenderer"),
    "SampleIngestor": ("spectrum_bars.ingest", "SampleIngestor"),
    "SpectrumAnalyzer": ("spectrum_bars.analyzer", "SpectrumAnalyzer"),
    "SpectrumEngine": ("spectrum_bars.engine", "SpectrumEngine"),
    "main": ("spectrum_bars.cli", "main"),
}


if TYPE_CHECKING:  # pragma: no cover - only for type checkers
    from spectrum_bars.analyzer import SpectrumAnalyzer
    from spectrum_bars.audio import AudioSource, DemoSource, MicSource
    from spectrum_bars.cli import main
    from spectrum_bars.config import AnalyzerConfig, ConfigurationError
    from spectrum_bars.engine import SpectrumEngine
    from spectrum_bars.ingest import SampleIngestor
    from spectrum_bars.renderer import LevelRenderer
    from spectrum_bars.scale import Bar, BarTable, build_bar_table, tempered_scale
    from spectrum_bars.visualizer import BarVisualizer


def __getattr__(name: str) -> Any:
    """Lazily import heavy submodules on demand."""

    if name in _EXPORT_MAP:
        module_name, attribute = _EXPORT_MAP[name]
        module = import_module(module_name)
        value = getattr(module, attribute)
        globals()[name] = value
        return value
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
