"""
Break Marker Parsing

Extracts <break/> pauses from SSML markup and positions them relative to the
start of the speech, either on detected silence or by word-rate estimate.

Example:
    >>> from voicemix.breaks import parse_breaks
    >>> parse_breaks('Hello <break time="2s"/> world')
    [BreakMarker(position=0.4, duration=2.0)]
"""

from .config import BreakConfig, DEFAULT_CONFIG
from .parser import (
    BreakMarker,
    BreakTag,
    align_breaks,
    count_words,
    estimate_positions,
    extract_breaks,
    parse_break_time,
    parse_breaks,
    speaking_rate,
)

__all__ = [
    'BreakConfig',
    'DEFAULT_CONFIG',
    'BreakMarker',
    'BreakTag',
    'align_breaks',
    'count_words',
    'estimate_positions',
    'extract_breaks',
    'parse_break_time',
    'parse_breaks',
    'speaking_rate',
]
