"""
Offline renderer: additive mixing of enveloped tracks into one buffer.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List
import logging
import math
import time

import numpy as np

from voicemix.errors import RenderError
from voicemix.pcm import PcmAsset
from voicemix.timeline import GainEnvelope


logger = logging.getLogger("voicemix.render")


@dataclass(frozen=True)
class Track:
    """
    One source scheduled on the render timeline.

    Attributes:
        asset: Source audio
        envelope: Gain curve evaluated on absolute render time
        start_offset: Seconds from render start at which the asset begins
        name: Label used in logs
    """

    asset: PcmAsset
    envelope: GainEnvelope
    start_offset: float = 0.0
    name: str = ""


def output_frames(total_duration: float, sample_rate: int) -> int:
    # round first so 54.5 * 44100 does not become one frame longer
    return max(0, int(math.ceil(round(total_duration * sample_rate, 6))))


def render(
    tracks: Iterable[Track],
    total_duration: float,
    sample_rate: int,
    channel_count: int,
) -> PcmAsset:
    """
    Mix tracks into a single PCM buffer of `total_duration` seconds.

    Each track is resampled and channel-mapped to the output format, clipped
    to the render length, scaled sample by sample by its envelope and summed.
    No limiting is applied; sums may exceed +/-1.0.

    Raises:
        RenderError: If the output cannot be allocated or a track cannot be mixed
    """
    if sample_rate <= 0 or channel_count <= 0:
        raise RenderError(f"Invalid output format: {sample_rate} Hz, {channel_count} channels")

    track_list: List[Track] = list(tracks)
    n_frames = output_frames(total_duration, sample_rate)
    t0 = time.perf_counter()
    try:
        out = np.zeros((channel_count, n_frames), dtype=np.float64)
        for track in track_list:
            _mix_track(out, track, sample_rate, channel_count)
        result = PcmAsset(out.astype(np.float32), sample_rate, label="mix")
    except (MemoryError, ValueError) as exc:
        logger.exception("Offline render failed")
        raise RenderError(f"Offline render failed: {exc}") from exc

    logger.info(
        "Rendered %d tracks into %.2fs (%d frames, %d ch) in %.2fs",
        len(track_list),
        n_frames / float(sample_rate),
        n_frames,
        channel_count,
        time.perf_counter() - t0,
    )
    return result


def _mix_track(out: np.ndarray, track: Track, sample_rate: int, channel_count: int) -> None:
    source = track.asset.copy().resampled(sample_rate).with_channels(channel_count)
    n_frames = out.shape[1]
    start = int(round(max(0.0, track.start_offset) * sample_rate))
    if start >= n_frames or source.frames == 0:
        logger.debug("Track %s starts past the end of the render; skipped", track.name or "?")
        return
    frames = min(source.frames, n_frames - start)
    times = (start + np.arange(frames, dtype=np.float64)) / sample_rate
    gain = track.envelope.values_at(times)
    out[:, start:start + frames] += source.samples[:, :frames].astype(np.float64) * gain
