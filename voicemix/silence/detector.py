"""
Amplitude-threshold silence detector.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional
import logging

import numpy as np

from voicemix.pcm import PcmAsset
from .config import SilenceConfig, DEFAULT_CONFIG


logger = logging.getLogger("voicemix.silence")


@dataclass(frozen=True)
class SilenceSegment:
    start: float
    duration: float

    @property
    def end(self) -> float:
        return self.start + self.duration


def window_levels(mono: np.ndarray, window: int, hop: int) -> np.ndarray:
    """Mean absolute amplitude of each full window, stepping by `hop` samples."""
    n = len(mono)
    if n == 0:
        return np.zeros(0)
    if n <= window:
        return np.array([np.abs(mono).mean()])
    starts = np.arange(0, n - window + 1, hop)
    csum = np.concatenate(([0.0], np.cumsum(np.abs(mono))))
    return (csum[starts + window] - csum[starts]) / window


def detect_silence(asset: PcmAsset, config: Optional[SilenceConfig] = None) -> List[SilenceSegment]:
    """
    Report quiet intervals of a PCM asset.

    All channels are averaged to mono. A window is silent when its mean
    absolute amplitude is below the threshold; runs of silent windows become
    candidate segments, short candidates are dropped, and the survivors are
    merged when the gap between them is under `merge_gap`.

    Returns:
        Segments sorted by start time, in seconds from the start of the asset
    """
    cfg = config or DEFAULT_CONFIG
    sr = asset.sample_rate
    window = max(1, int(round(cfg.window_seconds * sr)))
    hop = max(1, int(round(cfg.hop_seconds * sr)))

    mono = asset.mono()
    levels = window_levels(mono, window, hop)
    silent = levels < cfg.threshold

    candidates: List[SilenceSegment] = []
    run_start: Optional[int] = None
    last_end = 0
    for idx, is_silent in enumerate(silent):
        win_start = idx * hop
        if is_silent:
            if run_start is None:
                run_start = win_start
            last_end = min(win_start + window, len(mono))
        elif run_start is not None:
            _close_run(candidates, run_start, last_end, sr, cfg.min_duration)
            run_start = None
    if run_start is not None:
        _close_run(candidates, run_start, last_end, sr, cfg.min_duration)

    segments = _merge(candidates, cfg.merge_gap)
    logger.debug(
        "Silence in %s: %s",
        asset.label or "asset",
        ", ".join(f"{s.start:.2f}s+{s.duration:.2f}s" for s in segments) or "none",
    )
    return segments


def _close_run(out: List[SilenceSegment], start: int, end: int, sr: int, min_duration: float) -> None:
    duration = (end - start) / float(sr)
    if duration >= min_duration:
        out.append(SilenceSegment(start=start / float(sr), duration=duration))


def _merge(segments: List[SilenceSegment], merge_gap: float) -> List[SilenceSegment]:
    merged: List[SilenceSegment] = []
    for seg in sorted(segments, key=lambda s: s.start):
        if merged and seg.start - merged[-1].end < merge_gap:
            prev = merged[-1]
            end = max(prev.end, seg.end)
            merged[-1] = SilenceSegment(start=prev.start, duration=end - prev.start)
        else:
            merged.append(seg)
    return merged
