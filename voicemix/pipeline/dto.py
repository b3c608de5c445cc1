"""Dataclass-based DTOs for mix requests and results."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Literal, Optional
import uuid

from voicemix.mixer import MixConfig, RenderedMix


ResultStatus = Literal["ok", "fallback", "error"]


@dataclass
class MixRequest:
    """
    One mix request as received from the UI layer.

    Asset fields are location references (path or URL) resolved by the
    service's AssetLoader; `music` backs intro and outro when they are unset.
    """

    speech_bytes: bytes
    markup_text: str = ""
    config: MixConfig = field(default_factory=MixConfig)
    intro: Optional[str] = None
    outro: Optional[str] = None
    music: Optional[str] = None
    break_effect: Optional[str] = None
    request_id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def asset_locations(self) -> Dict[str, str]:
        refs = {
            "intro": self.intro,
            "outro": self.outro,
            "music": self.music,
            "break_effect": self.break_effect,
        }
        return {k: v for k, v in refs.items() if v}


@dataclass
class MixResult:
    request_id: str
    status: ResultStatus
    mix: Optional[RenderedMix] = None
    stage: Optional[str] = None
    detail: Optional[str] = None
    elapsed: float = 0.0

    @property
    def ok(self) -> bool:
        return self.status != "error"

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "request_id": self.request_id,
            "status": self.status,
            "stage": self.stage,
            "detail": self.detail,
            "elapsed": round(self.elapsed, 3),
        }
        if self.mix is not None:
            out["mix"] = {
                "duration": self.mix.duration_seconds,
                "sample_rate": self.mix.asset.sample_rate,
                "channels": self.mix.asset.channel_count,
                "bytes": len(self.mix.wav_bytes),
                "bypassed": self.mix.bypassed,
                "timeline": self.mix.timeline.to_dict() if self.mix.timeline else None,
                "markers": [
                    {"position": m.position, "duration": m.duration} for m in self.mix.markers
                ],
            }
        return out
