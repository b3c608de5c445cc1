"""
Silence Detection

Scans a PCM asset with a sliding mean-amplitude window and reports the quiet
intervals. Used to align break sound effects with the pauses the speech
engine actually rendered.

Example:
    >>> from voicemix.silence import detect_silence
    >>> for seg in detect_silence(speech):
    ...     print(seg.start, seg.duration)
"""

from .config import SilenceConfig, DEFAULT_CONFIG
from .detector import SilenceSegment, detect_silence, window_levels

__all__ = [
    'SilenceConfig',
    'DEFAULT_CONFIG',
    'SilenceSegment',
    'detect_silence',
    'window_levels',
]
