"""
Timeline construction: absolute start/end times of every mix stage.
"""

from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Tuple
import logging

if TYPE_CHECKING:
    from voicemix.mixer.config import MixConfig


logger = logging.getLogger("voicemix.timeline")

MIN_SPEECH_SECONDS = 0.1


@dataclass(frozen=True)
class Timeline:
    """
    Stage timestamps in seconds from render start.

    Outro fields are None when the outro is disabled.
    """

    fade_start: float
    fade_end: float
    speech_start: float
    speech_end: float
    total_duration: float
    outro_fade_in_start: Optional[float] = None
    outro_fade_in_end: Optional[float] = None
    outro_hold_end: Optional[float] = None
    outro_fade_out_end: Optional[float] = None
    intro_start: float = 0.0

    @property
    def has_outro(self) -> bool:
        return self.outro_fade_in_start is not None

    def stages(self) -> List[Tuple[str, float]]:
        """Present stages in schedule order."""
        names = [
            "intro_start",
            "fade_start",
            "fade_end",
            "speech_start",
            "speech_end",
            "outro_fade_in_start",
            "outro_fade_in_end",
            "outro_hold_end",
            "outro_fade_out_end",
        ]
        return [(n, getattr(self, n)) for n in names if getattr(self, n) is not None]

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _clamp(value: float) -> float:
    return max(0.0, float(value))


def build_timeline(config: "MixConfig", speech_duration: float) -> Timeline:
    """
    Compute the mix timeline for a speech of the given duration.

    Speech starts halfway through the intro fade so the voice overlaps the
    music tail. Negative timestamps from pathological configs are clamped to
    0, never rejected.
    """
    intro = float(config.intro_duration)
    fade = float(config.intro_fade_duration)
    speech_duration = float(speech_duration)

    fade_start = _clamp(intro)
    fade_end = _clamp(fade_start + fade)
    speech_start = _clamp(fade_start + fade / 2.0)
    speech_end = speech_start + max(speech_duration, MIN_SPEECH_SECONDS)

    outro_fields: Dict[str, float] = {}
    outro_length = 0.0
    if config.outro_enabled:
        outro_length = float(config.outro_duration)
        outro_fields = {
            "outro_fade_in_start": _clamp(speech_end - config.outro_fade_in_duration),
            "outro_fade_in_end": speech_end,
            "outro_hold_end": _clamp(speech_end + (outro_length - config.outro_fade_out_duration)),
            "outro_fade_out_end": _clamp(speech_end + outro_length),
        }

    total = _clamp(intro + fade + speech_duration + outro_length + config.safety_pad)

    timeline = Timeline(
        fade_start=fade_start,
        fade_end=fade_end,
        speech_start=speech_start,
        speech_end=speech_end,
        total_duration=total,
        **outro_fields,
    )
    logger.debug("Timeline: %s", ", ".join(f"{n}={v:.3f}" for n, v in timeline.stages()))
    return timeline
