"""
Timeline and gain envelope scheduling.

`build_timeline` turns a mix configuration and the measured speech duration
into absolute stage times; `build_envelope` turns those times into one gain
curve per track.

Example:
    >>> from voicemix.mixer import MixConfig
    >>> from voicemix.timeline import build_timeline, build_envelope
    >>> tl = build_timeline(MixConfig(intro_duration=22, intro_fade_duration=7), 10.0)
    >>> tl.speech_start
    25.5
    >>> build_envelope("intro", tl, MixConfig()).value_at(30.0)
    0.0
"""

from .timeline import Timeline, build_timeline, MIN_SPEECH_SECONDS
from .envelope import (
    Breakpoint,
    Curve,
    EnvelopeBuilder,
    GainEnvelope,
    TrackRole,
    EXP_FLOOR,
    MAX_GAIN,
    break_play_duration,
    build_break_envelope,
    build_envelope,
)

__all__ = [
    'Timeline',
    'build_timeline',
    'MIN_SPEECH_SECONDS',
    'Breakpoint',
    'Curve',
    'EnvelopeBuilder',
    'GainEnvelope',
    'TrackRole',
    'EXP_FLOOR',
    'MAX_GAIN',
    'break_play_duration',
    'build_break_envelope',
    'build_envelope',
]
