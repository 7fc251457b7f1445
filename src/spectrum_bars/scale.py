"""Map a quarter-tone equal-tempered scale onto linear FFT bins.

Low notes are closer together than the FFT bin spacing, so several bars end up
sharing one bin; those bars get interpolation factors that ramp from the level
of the bin below towards the shared bin. High notes are further apart than the
bin spacing, so each bar claims the bins halfway up to the next note and shows
the loudest of them.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterator, List, Sequence, Tuple

from spectrum_bars.config import AnalyzerConfig, ConfigurationError
from spectrum_bars.utils import is_power_of_two, round_half_up

QUARTER_TONE = 2.0 ** (1.0 / 24.0)
REFERENCE_PITCH = 440.0
# A4 is 114 quarter tones above C0
C0 = REFERENCE_PITCH * QUARTER_TONE ** -114


@dataclass(frozen=True)
class Bar:
    """One visual column.

    ``end_bin`` is 0 for a single-bin bar, otherwise the last bin (inclusive)
    of the range the bar aggregates. ``factor`` is 0 when the bar owns its bin,
    otherwise its place in ``(0, 1]`` within a run of bars sharing the bin.
    """

    position: int
    bin: int
    end_bin: int = 0
    factor: float = 0.0


@dataclass(frozen=True)
class BarTable:
    bars: Tuple[Bar, ...]
    scale: Tuple[float, ...]
    sample_rate: float
    window_size: int

    def __len__(self) -> int:
        return len(self.bars)

    def __iter__(self) -> Iterator[Bar]:
        return iter(self.bars)

    def __getitem__(self, index: int) -> Bar:
        return self.bars[index]


def tempered_scale(
    min_freq: float, max_freq: float, group_stride: int = 1
) -> Tuple[float, ...]:
    """Return the quarter-tone frequencies between ``min_freq`` and ``max_freq``.

    Only every ``group_stride``-th quarter tone counted from C0 is kept, so a
    stride of 2 yields semitones. A non-positive stride yields no frequencies.
    """
    if not math.isfinite(max_freq):
        raise ConfigurationError(f"max_freq must be finite, got {max_freq!r}")
    if group_stride <= 0:
        return ()
    freqs: List[float] = []
    i = 0
    while True:
        freq = C0 * QUARTER_TONE**i
        if freq > max_freq:
            break
        if freq >= min_freq and i % group_stride == 0:
            freqs.append(freq)
        i += 1
    return tuple(freqs)


def freq_to_bin(freq: float, sample_rate: float, window_size: int) -> int:
    """Nearest FFT bin for ``freq``, never past the last usable bin."""
    last_bin = window_size // 2 - 1
    return min(round_half_up(freq * window_size / sample_rate), last_bin)


def _check_bin_math(sample_rate: float, window_size: int) -> None:
    if not math.isfinite(sample_rate) or sample_rate <= 0:
        raise ConfigurationError(
            f"sample_rate must be a positive number of Hz, got {sample_rate!r}"
        )
    if window_size < 2 or not is_power_of_two(window_size):
        raise ConfigurationError(
            f"window_size must be a power of two >= 2, got {window_size!r}"
        )


def _finish_run(run: Sequence[Tuple[int, int, int]]) -> List[Bar]:
    size = len(run)
    if size == 1:
        position, start, end = run[0]
        return [Bar(position, start, end, 0.0)]
    return [
        Bar(position, start, end, (offset + 1) / size)
        for offset, (position, start, end) in enumerate(run)
    ]


def build_bar_table(
    sample_rate: float,
    window_size: int,
    min_freq: float,
    max_freq: float,
    group_stride: int,
) -> BarTable:
    """Assign every note of the tempered scale to a bin or a range of bins."""
    _check_bin_math(sample_rate, window_size)
    scale = tempered_scale(min_freq, max_freq, group_stride)
    bins = [freq_to_bin(freq, sample_rate, window_size) for freq in scale]

    bars: List[Bar] = []
    run: List[Tuple[int, int, int]] = []
    prev_bin = None
    prev_idx = None

    for index, own_bin in enumerate(bins):
        # continue right after the bins claimed by the previous bar
        if prev_bin is not None and own_bin >= prev_bin + 1:
            start = prev_bin + 1
        else:
            start = own_bin

        if start != prev_idx:
            if run:
                bars.extend(_finish_run(run))
            run = []
            prev_idx = start

        prev_bin = own_bin
        if index + 1 < len(bins):
            gap = bins[index + 1] - own_bin
            if gap > 1:
                prev_bin += min(round_half_up(gap / 2), gap - 1)
            elif gap <= 0:
                # the next bar starts on this bin, so it cannot end a range
                prev_bin = own_bin - 1

        end = prev_bin if prev_bin > start else 0
        run.append((index, start, end))

    if run:
        bars.extend(_finish_run(run))

    return BarTable(
        bars=tuple(bars),
        scale=scale,
        sample_rate=float(sample_rate),
        window_size=int(window_size),
    )


def build_from_config(config: AnalyzerConfig) -> BarTable:
    return build_bar_table(
        config.sample_rate,
        config.window_size,
        config.min_freq,
        config.max_freq,
        config.group_stride,
    )


__all__ = [
    "Bar",
    "BarTable",
    "C0",
    "QUARTER_TONE",
    "build_bar_table",
    "build_from_config",
    "freq_to_bin",
    "tempered_scale",
]
