"""Configuration for the bar spectrum analyzer."""

from __future__ import annotations

import dataclasses
import json
import math
from pathlib import Path
from typing import Any, Dict, Optional

from spectrum_bars.utils import is_power_of_two


class ConfigurationError(ValueError):
    """Raised when an analyzer configuration cannot produce valid bin math."""


_ALIASES = {
    "samplerate": "sample_rate",
    "fft_size": "window_size",
    "group_notes": "group_stride",
}


def _rename_aliases(raw: Dict[str, Any]) -> Dict[str, Any]:
    normalized = dict(raw)
    for legacy_key, new_key in _ALIASES.items():
        if legacy_key in normalized:
            normalized.setdefault(new_key, normalized.pop(legacy_key))
    return normalized


@dataclasses.dataclass(frozen=True)
class AnalyzerConfig:
    """Settings that determine the bar table and the render cadence."""

    sample_rate: float = 44100.0
    window_size: int = 2048
    min_freq: float = 20.0
    max_freq: float = 22000.0
    group_stride: int = 2
    refresh_hz: float = 60.0
    bar_spacing: float = 0.1
    min_db: float = -100.0
    max_db: float = 0.0
    block_size: int = 512

    def validate(self) -> "AnalyzerConfig":
        if not math.isfinite(self.sample_rate) or self.sample_rate <= 0:
            raise ConfigurationError(
                f"sample_rate must be a positive number of Hz, got {self.sample_rate!r}"
            )
        if isinstance(self.window_size, bool) or not isinstance(self.window_size, int):
            raise ConfigurationError(
                f"window_size must be an integer, got {self.window_size!r}"
            )
        if self.window_size < 2 or not is_power_of_two(self.window_size):
            raise ConfigurationError(
                f"window_size must be a power of two >= 2, got {self.window_size}"
            )
        for name in ("min_freq", "max_freq"):
            value = getattr(self, name)
            if not math.isfinite(value) or value < 0:
                raise ConfigurationError(
                    f"{name} must be a finite, non-negative frequency, got {value!r}"
                )
        if isinstance(self.group_stride, bool) or not isinstance(self.group_stride, int):
            raise ConfigurationError(
                f"group_stride must be an integer, got {self.group_stride!r}"
            )
        if not math.isfinite(self.refresh_hz) or self.refresh_hz <= 0:
            raise ConfigurationError(
                f"refresh_hz must be positive, got {self.refresh_hz!r}"
            )
        if not self.min_db < self.max_db:
            raise ConfigurationError(
                f"min_db ({self.min_db}) must be below max_db ({self.max_db})"
            )
        if self.block_size <= 0:
            raise ConfigurationError(
                f"block_size must be positive, got {self.block_size!r}"
            )
        return self

    def replace(self, **changes: Any) -> "AnalyzerConfig":
        return dataclasses.replace(self, **changes)

    @staticmethod
    def from_dict(raw: Dict[str, Any]) -> "AnalyzerConfig":
        normalized = _rename_aliases(raw)
        known = {f.name for f in dataclasses.fields(AnalyzerConfig)}
        filtered = {k: v for k, v in normalized.items() if k in known}
        for key in ("sample_rate", "min_freq", "max_freq", "refresh_hz", "bar_spacing"):
            if key in filtered:
                filtered[key] = float(filtered[key])
        return AnalyzerConfig(**filtered)


def load_config(path: Path, base: Optional[Dict[str, Any]] = None) -> AnalyzerConfig:
    """Read a JSON config, layering its keys over ``base`` when given."""
    data = _rename_aliases(base or {})
    data.update(_rename_aliases(json.loads(Path(path).read_text())))
    return AnalyzerConfig.from_dict(data)


__all__ = ["AnalyzerConfig", "ConfigurationError", "load_config"]
