"""Tests for the tempered scale and the bar table."""

from __future__ import annotations

import itertools
import math
import sys
from pathlib import Path

import pytest

np = pytest.importorskip("numpy")

sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

from spectrum_bars.config import ConfigurationError
from spectrum_bars.scale import (
    C0,
    QUARTER_TONE,
    Bar,
    build_bar_table,
    freq_to_bin,
    tempered_scale,
)

CONFIGS = [
    (48000.0, 2048, 20.0, 22000.0, 2),
    (44100.0, 2048, 20.0, 22000.0, 1),
    (44100.0, 4096, 30.0, 16000.0, 3),
    (22050.0, 512, 50.0, 8000.0, 4),
    (96000.0, 1024, 20.0, 40000.0, 2),
    # max_freq above Nyquist pins the top notes to the last bin
    (16000.0, 2048, 20.0, 22000.0, 2),
    (8000.0, 1024, 20.0, 22000.0, 1),
]


def _table():
    return build_bar_table(48000.0, 2048, 20.0, 22000.0, 2)


def test_c0_is_about_16_hz():
    assert C0 == pytest.approx(16.3516, abs=1e-3)


def test_tempered_scale_bounds_and_order():
    scale = tempered_scale(20.0, 22000.0, 2)
    assert scale
    assert scale[0] >= 20.0
    assert scale[-1] <= 22000.0
    assert all(b > a for a, b in zip(scale, scale[1:]))


def test_stride_keeps_only_multiples_of_the_stride():
    for stride in (1, 2, 3, 6):
        for freq in tempered_scale(20.0, 20000.0, stride):
            index = round(math.log(freq / C0, QUARTER_TONE))
            assert index % stride == 0


def test_stride_two_gives_semitones():
    scale = tempered_scale(20.0, 22000.0, 2)
    ratios = [b / a for a, b in zip(scale, scale[1:])]
    assert ratios == pytest.approx([2.0 ** (1.0 / 12.0)] * len(ratios))


def test_empty_scale_cases():
    assert tempered_scale(1000.0, 500.0, 2) == ()
    assert tempered_scale(20.0, 22000.0, 0) == ()
    assert tempered_scale(20.0, 22000.0, -3) == ()
    assert len(build_bar_table(48000.0, 2048, 1000.0, 500.0, 2)) == 0
    assert len(build_bar_table(48000.0, 2048, 20.0, 22000.0, 0)) == 0


def test_freq_to_bin_rounds_and_clamps():
    assert freq_to_bin(1000.0, 48000.0, 2048) == 43
    # 1.5 bins rounds up
    assert freq_to_bin(1.5 * 48000.0 / 2048, 48000.0, 2048) == 2
    assert freq_to_bin(30000.0, 48000.0, 2048) == 1023


@pytest.mark.parametrize(
    "sample_rate,window_size",
    [(0.0, 2048), (-44100.0, 2048), (float("nan"), 2048), (48000.0, 0), (48000.0, 1000)],
)
def test_invalid_bin_math_is_rejected(sample_rate, window_size):
    with pytest.raises(ConfigurationError):
        build_bar_table(sample_rate, window_size, 20.0, 22000.0, 2)


@pytest.mark.parametrize("config", CONFIGS)
def test_positions_are_contiguous(config):
    table = build_bar_table(*config)
    assert [bar.position for bar in table] == list(range(len(table.scale)))


@pytest.mark.parametrize("config", CONFIGS)
def test_bins_never_decrease(config):
    table = build_bar_table(*config)
    last_bin = config[1] // 2 - 1
    for prev, bar in zip(table, itertools.islice(table, 1, None)):
        assert bar.bin >= prev.bin
    for bar in table:
        assert 0 <= bar.bin <= last_bin
        if bar.end_bin:
            assert bar.bin < bar.end_bin <= last_bin


@pytest.mark.parametrize("config", CONFIGS)
def test_claimed_ranges_do_not_overlap(config):
    table = build_bar_table(*config)
    for bar, nxt in zip(table, itertools.islice(table, 1, None)):
        if bar.end_bin:
            assert nxt.bin > bar.end_bin


def test_notes_past_nyquist_share_the_last_bin():
    table = build_bar_table(16000.0, 2048, 20.0, 22000.0, 2)
    last_bin = 2048 // 2 - 1
    pinned = [bar for bar in table if bar.bin == last_bin]
    assert len(pinned) > 1
    assert pinned[-1] == table[len(table) - 1]
    assert all(bar.end_bin == 0 for bar in pinned)
    k = len(pinned)
    assert [bar.factor for bar in pinned] == pytest.approx(
        [(j + 1) / k for j in range(k)]
    )
    before = table[pinned[0].position - 1]
    assert before.bin < last_bin
    assert before.end_bin < last_bin


@pytest.mark.parametrize("config", CONFIGS)
def test_shared_bins_ramp_their_factors(config):
    table = build_bar_table(*config)
    for _, group in itertools.groupby(table, key=lambda bar: bar.bin):
        run = list(group)
        k = len(run)
        if k == 1:
            assert run[0].factor == 0.0
        else:
            assert [bar.factor for bar in run] == pytest.approx(
                [(j + 1) / k for j in range(k)]
            )


def test_low_end_bars_share_the_first_bin():
    table = _table()
    first = table.bars[:10]
    assert all(bar.bin == 1 for bar in first)
    assert [bar.factor for bar in first] == pytest.approx(
        [0.1, 0.2, 0.3, 0.4, 0.5, 0.6, 0.7, 0.8, 0.9, 1.0]
    )
    assert table[10].bin == 2


def test_high_end_bars_claim_half_the_gap():
    table = _table()
    # the semitone below 1 kHz sits at bin 42, the next one at bin 45
    bar = next(b for b, f in zip(table, table.scale) if 980.0 < f < 990.0)
    assert bar == Bar(bar.position, 42, 44, 0.0)
    wide = [b for b in table if b.end_bin]
    assert wide
    assert table[len(table) - 1].bin > 500


def test_rebuild_is_idempotent():
    assert _table() == _table()
    assert _table().bars == _table().bars
