"""Command-line entrypoint for the bar spectrum visualizer."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from spectrum_bars.analyzer import SpectrumAnalyzer
from spectrum_bars.audio import AudioSource, DemoSource, MicSource, sd
from spectrum_bars.config import AnalyzerConfig, ConfigurationError, load_config

_CONFIG_NAME = "spectrum_bars_config.json"


def load_default_config() -> dict[str, Any]:
    """Load the shipped default configuration."""
    config_path = Path(__file__).with_name(_CONFIG_NAME)
    with config_path.open("r", encoding="utf-8") as handle:
        return json.load(handle)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Real-time equal-tempered bar spectrum of an audio input"
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="JSON file overriding the default configuration",
    )
    parser.add_argument("--samplerate", type=float, default=None)
    parser.add_argument("--fft", type=int, default=None, help="Window size (power of two)")
    parser.add_argument("--min-freq", type=float, default=None)
    parser.add_argument("--max-freq", type=float, default=None)
    parser.add_argument(
        "--group",
        type=int,
        default=None,
        help="Keep every Nth quarter tone (2 = semitones)",
    )
    parser.add_argument("--refresh", type=float, default=None, help="Frames per second")
    parser.add_argument("--device", type=str, default=None)
    parser.add_argument("--demo", action="store_true")
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Python logging level (default: INFO)",
    )
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> AnalyzerConfig:
    defaults = load_default_config()
    if args.config is not None:
        config = load_config(args.config, base=defaults)
    else:
        config = AnalyzerConfig.from_dict(defaults)
    overrides = {
        "sample_rate": args.samplerate,
        "window_size": args.fft,
        "min_freq": args.min_freq,
        "max_freq": args.max_freq,
        "group_stride": args.group,
        "refresh_hz": args.refresh,
    }
    config = config.replace(**{k: v for k, v in overrides.items() if v is not None})
    return config.validate()


def create_source(args: argparse.Namespace, config: AnalyzerConfig) -> AudioSource:
    if args.demo or sd is None:
        return DemoSource(config.sample_rate, config.block_size)
    try:
        samplerate = config.sample_rate if args.samplerate is not None else None
        return MicSource(samplerate, config.block_size, device=args.device)
    except Exception as exc:  # pragma: no cover - interactive fallback
        logging.warning("Could not initialize microphone input: %s", exc)
        logging.warning(
            "Falling back to demo mode. Use --device to select input or install sounddevice."
        )
        return DemoSource(config.sample_rate, config.block_size)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv if argv is not None else sys.argv[1:])
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(message)s",
    )
    try:
        config = build_config(args)
    except ConfigurationError as exc:
        logging.error("Invalid configuration: %s", exc)
        return 2

    # imported here so the CLI can report configuration errors without a display
    from spectrum_bars.visualizer import BarVisualizer

    source = create_source(args, config)
    analyzer = SpectrumAnalyzer(config)
    BarVisualizer(analyzer, source=source).run()
    return 0


__all__ = ["parse_args", "build_config", "create_source", "load_default_config", "main"]
