"""
Mixer configuration.
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Literal, Mapping, Optional
import logging
import os
import re

from voicemix.errors import ConfigurationError


logger = logging.getLogger("voicemix.mixer")

FadeType = Literal['linear', 'exponential']

ENV_PREFIX = "VOICEMIX_"


@dataclass(frozen=True)
class MixConfig:
    """
    Configuration for one mix request. Supplied whole; never mutated mid-render.

    Attributes:
        enabled: Mix music around the speech; False returns speech only
        intro_duration: Seconds of music before the fade begins
        intro_fade_duration: Length of the intro fade; speech starts halfway in
        fade_type: 'linear' or 'exponential' intro fade
        music_volume: Intro/outro music gain, 0..1
        speech_volume: Speech gain after its rise, 0..1
        outro_enabled: Bring music back in under the end of the speech
        outro_fade_in_duration: Outro rise, ending when the speech ends
        outro_duration: Outro length after the speech ends
        outro_fade_out_duration: Final fade at the end of the outro
        break_sound_enabled: Play the break effect at each pause marker
        outro_boost: Outro music plays at min(1, music_volume * outro_boost)
        break_gain: Peak gain of the break effect
        speech_rise_duration: Seconds for speech to rise from 0 to speech_volume
        safety_pad: Extra seconds rendered so trailing fades are not truncated
        output_sample_rate: Render rate; None uses the speech asset's rate
        output_channels: Render channel count
    """

    enabled: bool = True
    intro_duration: float = 15.0
    intro_fade_duration: float = 7.0
    fade_type: FadeType = 'linear'
    music_volume: float = 0.3
    speech_volume: float = 1.0
    outro_enabled: bool = True
    outro_fade_in_duration: float = 10.0
    outro_duration: float = 15.0
    outro_fade_out_duration: float = 5.0
    break_sound_enabled: bool = True

    # Tuning
    outro_boost: float = 1.2
    break_gain: float = 0.6
    speech_rise_duration: float = 1.0
    safety_pad: float = 0.5

    # Output
    output_sample_rate: Optional[int] = None
    output_channels: int = 2

    def validate(self) -> "MixConfig":
        """Raise ConfigurationError on values no render can honour."""
        for name in (
            'intro_duration',
            'intro_fade_duration',
            'outro_fade_in_duration',
            'outro_duration',
            'outro_fade_out_duration',
            'speech_rise_duration',
            'safety_pad',
        ):
            if getattr(self, name) < 0:
                raise ConfigurationError(f"{name} must be >= 0, got {getattr(self, name)}")
        for name in ('music_volume', 'speech_volume'):
            if not 0.0 <= getattr(self, name) <= 1.0:
                raise ConfigurationError(f"{name} must be within [0, 1], got {getattr(self, name)}")
        if self.fade_type not in ('linear', 'exponential'):
            raise ConfigurationError(f"Unknown fade_type: {self.fade_type}")
        if not 0.0 <= self.break_gain <= 1.5:
            raise ConfigurationError(f"break_gain must be within [0, 1.5], got {self.break_gain}")
        if self.outro_boost < 0:
            raise ConfigurationError(f"outro_boost must be >= 0, got {self.outro_boost}")
        if self.output_channels <= 0:
            raise ConfigurationError(f"output_channels must be positive, got {self.output_channels}")
        if self.output_sample_rate is not None and self.output_sample_rate <= 0:
            raise ConfigurationError(f"output_sample_rate must be positive, got {self.output_sample_rate}")
        return self

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "MixConfig":
        """
        Build from a JSON-style payload.

        Keys may be snake_case field names or their camelCase form
        (`introDuration`, `fadeType`, ...). Legacy `fadeDuration` maps to
        `intro_fade_duration`. Unknown keys are ignored.
        """
        known = {f.name: f for f in fields(cls)}
        values: Dict[str, Any] = {}
        for key, value in payload.items():
            name = _ALIASES.get(key, _snake_case(key))
            if name not in known:
                logger.debug("Ignoring unknown mix config key: %s", key)
                continue
            values[name] = _coerce(known[name].type, value)
        return cls(**values).validate()

    @classmethod
    def from_env(cls, prefix: str = ENV_PREFIX, base: Optional["MixConfig"] = None) -> "MixConfig":
        """Overlay VOICEMIX_* environment variables on `base` (or the defaults)."""
        base = base or cls()
        overrides: Dict[str, Any] = {}
        for f in fields(cls):
            raw = os.getenv(prefix + f.name.upper())
            if raw is None or raw == "":
                continue
            overrides[f.name] = _coerce(f.type, raw)
        return replace(base, **overrides).validate()

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


_ALIASES = {
    'fadeDuration': 'intro_fade_duration',
    'fade_duration': 'intro_fade_duration',
}


def _snake_case(key: str) -> str:
    return re.sub(r'(?<!^)(?=[A-Z])', '_', key).lower()


def _coerce(type_name: Any, value: Any) -> Any:
    """Convert env/JSON values to the field's declared type (annotations are strings)."""
    type_name = str(type_name)
    if value is None:
        return None
    if type_name == 'bool':
        if isinstance(value, str):
            return value.strip().lower() in ('1', 'true', 'yes', 'on')
        return bool(value)
    try:
        if type_name == 'float':
            return float(value)
        if type_name in ('int', 'Optional[int]'):
            return int(value)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"Invalid numeric value: {value!r}") from exc
    return value
