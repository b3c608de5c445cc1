"""
Configuration for break marker parsing.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class BreakConfig:
    """
    Break marker extraction and placement settings.

    Attributes:
        default_break_seconds: Duration assigned to a bare <break/> tag
        words_per_second: Assumed speaking rate when no speech duration is known
                          (~150 words per minute)
        match_ratio: A silence segment qualifies for an expected break when its
                     duration is at least this fraction of the expected one
        min_speaking_seconds: Floor for the speaking time used to derive a
                              rate from the measured speech duration
    """

    default_break_seconds: float = 4.5
    words_per_second: float = 2.5
    match_ratio: float = 0.7
    min_speaking_seconds: float = 0.5


DEFAULT_CONFIG = BreakConfig()
