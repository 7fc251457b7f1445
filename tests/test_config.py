"""Tests for configuration loading and validation."""

from __future__ import annotations

import json
import sys
from pathlib import Path

import pytest

pytest.importorskip("numpy")

sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

from spectrum_bars.config import AnalyzerConfig, ConfigurationError, load_config


def test_defaults_are_valid():
    config = AnalyzerConfig()
    assert config.validate() is config
    assert config.window_size == 2048
    assert config.group_stride == 2


def test_from_dict_accepts_aliases_and_ignores_unknown_keys():
    config = AnalyzerConfig.from_dict(
        {"samplerate": 48000, "fft_size": 4096, "group_notes": 3, "colour": "white"}
    )
    assert config.sample_rate == 48000.0
    assert isinstance(config.sample_rate, float)
    assert config.window_size == 4096
    assert config.group_stride == 3


def test_load_config_reads_json(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"min_freq": 40, "max_freq": 12000}))
    config = load_config(path)
    assert config.min_freq == 40.0
    assert config.max_freq == 12000.0


@pytest.mark.parametrize(
    "changes",
    [
        {"sample_rate": 0.0},
        {"sample_rate": float("inf")},
        {"window_size": 1000},
        {"window_size": 1},
        {"window_size": 2048.0},
        {"min_freq": -1.0},
        {"max_freq": float("nan")},
        {"group_stride": 1.5},
        {"refresh_hz": 0.0},
        {"min_db": 0.0},
        {"block_size": 0},
    ],
)
def test_invalid_values_are_rejected(changes):
    with pytest.raises(ConfigurationError):
        AnalyzerConfig().replace(**changes).validate()


def test_empty_ranges_are_not_errors():
    AnalyzerConfig(min_freq=5000.0, max_freq=100.0).validate()
    AnalyzerConfig(group_stride=0).validate()


def test_load_config_layers_over_a_base(tmp_path):
    path = tmp_path / "override.json"
    path.write_text(json.dumps({"fft_size": 4096, "max_freq": 9000}))
    base = {"window_size": 1024, "group_stride": 3, "max_freq": 20000.0}
    config = load_config(path, base=base)
    assert config.window_size == 4096
    assert config.group_stride == 3
    assert config.max_freq == 9000.0
