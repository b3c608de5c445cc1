"""
SSML markup for the synthesis request.

The same markup is later handed to the break parser, so <break/> tags written
by the user pass through untouched while the rest of the text is escaped.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional
from xml.sax.saxutils import escape, quoteattr
import re


BREAK_PASSTHROUGH_RE = re.compile(r"(<break\b[^>]*?/?>)", re.IGNORECASE)

DEFAULT_VOICE = "en-US-AriaNeural"


@dataclass(frozen=True)
class VoicePreset:
    rate: float = 1.0
    pitch: float = 1.0
    volume: float = 1.0
    style: str = "neutral"


VOICE_PRESETS: Dict[str, VoicePreset] = {
    "natural": VoicePreset(1.0, 1.0, 1.0, "neutral"),
    "expressive": VoicePreset(0.9, 1.1, 1.0, "excited"),
    "calm": VoicePreset(0.8, 0.9, 0.9, "calm"),
    "energetic": VoicePreset(1.2, 1.1, 1.0, "excited"),
    "professional": VoicePreset(0.95, 1.0, 0.95, "serious"),
}


def prosody_rate(rate: float) -> str:
    if rate > 1.2:
        return "+20%"
    if rate < 0.8:
        return "-20%"
    return "0%"


def prosody_pitch(pitch: float) -> str:
    if pitch > 1.1:
        return "+10%"
    if pitch < 0.9:
        return "-10%"
    return "0%"


def escape_text(text: str) -> str:
    """XML-escape text, keeping <break/> tags intact."""
    parts = BREAK_PASSTHROUGH_RE.split(text or "")
    return "".join(p if BREAK_PASSTHROUGH_RE.fullmatch(p) else escape(p) for p in parts)


def build_ssml(
    text: str,
    voice: str = DEFAULT_VOICE,
    preset: str = "natural",
    speaker_id: Optional[str] = None,
    lang: str = "en-US",
) -> str:
    """
    Wrap text in a <speak> document with voice, speaking style and prosody.

    Raises:
        ValueError: If the preset name is unknown
    """
    if preset not in VOICE_PRESETS:
        raise ValueError(f"Unknown voice preset: {preset}")
    p = VOICE_PRESETS[preset]

    body = escape_text(text)
    if speaker_id and speaker_id != "default":
        body = f"Speaking as {escape(speaker_id)}: {body}"

    return (
        f'<speak version="1.0" xmlns="http://www.w3.org/2001/10/synthesis" '
        f'xmlns:mstts="https://www.w3.org/2001/mstts" xml:lang={quoteattr(lang)}>'
        f"<voice name={quoteattr(voice)}>"
        f"<mstts:express-as style={quoteattr(p.style)}>"
        f'<prosody rate="{prosody_rate(p.rate)}" pitch="{prosody_pitch(p.pitch)}" '
        f'volume="{int(round(p.volume * 100))}%">'
        f"{body}"
        f"</prosody></mstts:express-as></voice></speak>"
    )
