"""
Audio mixer: speech framed by intro/outro music with break effects.

Builds the timeline and per-track envelopes, renders offline with the
handwritten sample mixer and serializes the result to WAV.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple, Union
import logging
import threading
import time

from voicemix.assets import resolve_asset
from voicemix.breaks import BreakConfig, BreakMarker, parse_breaks
from voicemix.errors import ConfigurationError, MixerBusyError
from voicemix.pcm import PcmAsset, encode_wav
from voicemix.render import Track, render
from voicemix.silence import SilenceConfig
from voicemix.timeline import Timeline, break_play_duration, build_envelope, build_timeline

from .config import MixConfig


@dataclass(frozen=True, eq=False)
class RenderedMix:
    """
    Final mix: PCM buffer plus its WAV bytes. Never mutated after creation.

    Attributes:
        asset: Rendered PCM (the speech asset itself when bypassed)
        wav_bytes: 16-bit PCM WAV serialization of `asset`
        bypassed: True when mixing was disabled and speech passed through
        timeline: Stage times used for the render; None when bypassed
        markers: Break markers an effect was scheduled for
    """

    asset: PcmAsset
    wav_bytes: bytes
    bypassed: bool = False
    timeline: Optional[Timeline] = None
    markers: Tuple[BreakMarker, ...] = field(default_factory=tuple)

    @property
    def duration_seconds(self) -> float:
        return self.asset.duration_seconds

    def save(self, output_path: Union[str, Path]) -> Path:
        out_path = Path(output_path).expanduser().resolve()
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_bytes(self.wav_bytes)
        return out_path


class AudioMixer:
    """Offline mixer with a single-flight busy flag."""

    def __init__(
        self,
        config: MixConfig | None = None,
        break_config: BreakConfig | None = None,
        silence_config: SilenceConfig | None = None,
    ):
        self.config = (config or MixConfig()).validate()
        self.break_config = break_config or BreakConfig()
        self.silence_config = silence_config or SilenceConfig()
        self.logger = logging.getLogger("voicemix.mixer")
        self._busy = threading.Lock()

    @property
    def is_busy(self) -> bool:
        return self._busy.locked()

    # ---------------------
    # Public API
    # ---------------------
    def mix(
        self,
        speech: PcmAsset,
        markup_text: str = "",
        intro: Optional[PcmAsset] = None,
        outro: Optional[PcmAsset] = None,
        break_effect: Optional[PcmAsset] = None,
        music: Optional[PcmAsset] = None,
        config: Optional[MixConfig] = None,
    ) -> RenderedMix:
        """
        Mix speech with music beds and break effects.

        Args:
            speech: Synthesized speech
            markup_text: Markup sent to the synthesis service; its <break/> tags
                         place the break effects
            intro: Intro music; falls back to `music`
            outro: Outro music; falls back to `music`
            break_effect: Sound played at each break marker
            music: Shared music bed used when intro/outro are not given
            config: Per-request configuration; defaults to the mixer's

        Raises:
            MixerBusyError: If another mix is rendering on this mixer
            ConfigurationError: If mixing is enabled but no intro music is usable
            RenderError: If the offline render fails
        """
        cfg = (config or self.config).validate()
        if not self._busy.acquire(blocking=False):
            raise MixerBusyError("A mix is already rendering on this mixer")
        try:
            return self._mix(cfg, speech, markup_text, intro, outro, break_effect, music)
        finally:
            self._busy.release()

    def speech_only(self, speech: PcmAsset) -> RenderedMix:
        """Pass the speech through unchanged."""
        self.logger.info("Mixing bypassed; returning speech only (%.2fs)", speech.duration_seconds)
        return RenderedMix(asset=speech, wav_bytes=encode_wav(speech), bypassed=True)

    # ---------------------
    # Internals
    # ---------------------
    def _mix(
        self,
        cfg: MixConfig,
        speech: PcmAsset,
        markup_text: str,
        intro: Optional[PcmAsset],
        outro: Optional[PcmAsset],
        break_effect: Optional[PcmAsset],
        music: Optional[PcmAsset],
    ) -> RenderedMix:
        if speech is None:
            raise ConfigurationError("No speech asset to mix")
        if not cfg.enabled:
            return self.speech_only(speech)

        intro_asset = resolve_asset(intro, music)
        if intro_asset is None:
            raise ConfigurationError("Mixing is enabled but no intro music is loaded")

        t0 = time.perf_counter()
        timeline = build_timeline(cfg, speech.duration_seconds)
        tracks: List[Track] = [
            Track(intro_asset, build_envelope("intro", timeline, cfg), 0.0, "intro"),
            Track(speech, build_envelope("speech", timeline, cfg), timeline.speech_start, "speech"),
        ]

        if timeline.has_outro:
            outro_asset = resolve_asset(outro, music)
            if outro_asset is not None:
                tracks.append(Track(
                    outro_asset,
                    build_envelope("outro", timeline, cfg),
                    timeline.outro_fade_in_start,
                    "outro",
                ))
            else:
                self.logger.info("Outro enabled but no outro music loaded; skipping outro")

        markers: List[BreakMarker] = []
        effect = resolve_asset(break_effect)
        if cfg.break_sound_enabled and effect is not None and markup_text:
            markers = parse_breaks(markup_text, speech, self.break_config, self.silence_config)
            tracks.extend(self._break_tracks(markers, effect, timeline, cfg))

        sample_rate = cfg.output_sample_rate or speech.sample_rate
        self.logger.info(
            "Mixing %.2fs speech: intro=%.1fs fade=%.1fs (%s) outro=%s breaks=%d -> %.2fs",
            speech.duration_seconds,
            cfg.intro_duration,
            cfg.intro_fade_duration,
            cfg.fade_type,
            "on" if timeline.has_outro else "off",
            len(markers),
            timeline.total_duration,
        )
        rendered = render(tracks, timeline.total_duration, sample_rate, cfg.output_channels)
        result = RenderedMix(
            asset=rendered,
            wav_bytes=encode_wav(rendered),
            timeline=timeline,
            markers=tuple(markers),
        )
        self.logger.info("Mix completed in %.2fs (%d bytes)", time.perf_counter() - t0, len(result.wav_bytes))
        return result

    def _break_tracks(
        self,
        markers: List[BreakMarker],
        effect: PcmAsset,
        timeline: Timeline,
        cfg: MixConfig,
    ) -> List[Track]:
        tracks: List[Track] = []
        for idx, marker in enumerate(markers):
            start = timeline.speech_start + marker.position
            play = break_play_duration(marker.duration, effect.duration_seconds)
            envelope = build_envelope("break", timeline, cfg, break_start=start, play_duration=play)
            tracks.append(Track(effect, envelope, start, f"break_{idx + 1}"))
        return tracks
