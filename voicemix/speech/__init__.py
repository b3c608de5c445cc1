"""
Speech markup utilities.

Builds the SSML sent to the synthesis service. The synthesis call itself
lives outside this package; its markup is reused to place break effects.

Example:
    >>> from voicemix.speech import build_ssml
    >>> build_ssml('Inhale. <break time="4s"/> Exhale.', preset="calm")
"""

from .ssml import (
    DEFAULT_VOICE,
    VOICE_PRESETS,
    VoicePreset,
    build_ssml,
    escape_text,
    prosody_pitch,
    prosody_rate,
)

__all__ = [
    "DEFAULT_VOICE",
    "VOICE_PRESETS",
    "VoicePreset",
    "build_ssml",
    "escape_text",
    "prosody_pitch",
    "prosody_rate",
]
