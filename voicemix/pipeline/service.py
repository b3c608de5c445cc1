"""Async mix service.

Awaits every decode before rendering, runs the CPU-bound mixer in a worker
thread and reports failures as typed results naming the stage that failed.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Tuple
import asyncio
import logging
import time

from voicemix.assets import AssetLoader
from voicemix.errors import ConfigurationError, MixError
from voicemix.mixer import AudioMixer
from voicemix.pcm import PcmAsset, decode_audio_async

from .dto import MixRequest, MixResult


@dataclass
class MixServiceConfig:
    # Render speech only when the mix itself is misconfigured (e.g. no intro)
    fallback_to_speech: bool = True


class MixService:
    """Loads assets for a MixRequest and renders it."""

    def __init__(
        self,
        loader: Optional[AssetLoader] = None,
        mixer: Optional[AudioMixer] = None,
        config: Optional[MixServiceConfig] = None,
    ):
        self.loader = loader or AssetLoader()
        self.mixer = mixer or AudioMixer()
        self.config = config or MixServiceConfig()
        self.logger = logging.getLogger("voicemix.pipeline")

    async def run(self, request: MixRequest) -> MixResult:
        t0 = time.perf_counter()
        self.logger.info("[Mix %s] Started (mixing=%s)", request.request_id, request.config.enabled)

        try:
            speech, assets = await self._load(request)
        except MixError as exc:
            return self._failure(request, exc, t0)

        try:
            mix = await asyncio.to_thread(
                self.mixer.mix,
                speech,
                request.markup_text,
                config=request.config,
                **assets,
            )
        except ConfigurationError as exc:
            if not self.config.fallback_to_speech:
                return self._failure(request, exc, t0)
            self.logger.warning("[Mix %s] %s; falling back to speech only", request.request_id, exc)
            return MixResult(
                request_id=request.request_id,
                status="fallback",
                mix=await asyncio.to_thread(self.mixer.speech_only, speech),
                stage=exc.stage,
                detail=str(exc),
                elapsed=time.perf_counter() - t0,
            )
        except MixError as exc:
            return self._failure(request, exc, t0)

        elapsed = time.perf_counter() - t0
        self.logger.info("[Mix %s] Completed in %.2fs (%.2fs audio)", request.request_id, elapsed, mix.duration_seconds)
        return MixResult(request_id=request.request_id, status="ok", mix=mix, elapsed=elapsed)

    async def _load(self, request: MixRequest) -> Tuple[PcmAsset, Dict[str, PcmAsset]]:
        """Decode speech and load referenced assets concurrently."""
        locations = request.asset_locations() if request.config.enabled else {}
        names = list(locations)
        results = await asyncio.gather(
            decode_audio_async(request.speech_bytes, label="speech"),
            *(self.loader.load(locations[n], label=n) for n in names),
        )
        speech = results[0]
        assets = dict(zip(names, results[1:]))
        self.logger.info(
            "[Mix %s] Decoded speech %.2fs and %d assets (%s)",
            request.request_id,
            speech.duration_seconds,
            len(assets),
            ", ".join(names) or "none",
        )
        return speech, assets

    def _failure(self, request: MixRequest, exc: MixError, t0: float) -> MixResult:
        self.logger.error("[Mix %s] Failed at %s stage: %s", request.request_id, exc.stage, exc)
        return MixResult(
            request_id=request.request_id,
            status="error",
            stage=exc.stage,
            detail=str(exc),
            elapsed=time.perf_counter() - t0,
        )
