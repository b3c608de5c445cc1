"""
Configuration for silence detection.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class SilenceConfig:
    """
    Amplitude-threshold silence detection settings.

    Attributes:
        window_seconds: Analysis window length (~50 ms)
        hop_seconds: Step between consecutive windows (~10 ms)
        threshold: Mean absolute amplitude below which a window is silent
                   (0.015 is roughly -36 dBFS)
        min_duration: Segments shorter than this are micro-pauses and dropped
        merge_gap: Segments separated by less than this are merged
    """

    window_seconds: float = 0.05
    hop_seconds: float = 0.01
    threshold: float = 0.015
    min_duration: float = 0.4
    merge_gap: float = 0.15


DEFAULT_CONFIG = SilenceConfig()
