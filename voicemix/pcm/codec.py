"""
PCM decode/encode.

`encode_wav` writes the canonical 44-byte RIFF/WAVE header followed by
interleaved 16-bit little-endian samples. `decode_audio` is the inverse for
WAV input and also accepts anything libsndfile or ffmpeg (via pydub) can read,
such as the MP3 bytes returned by a synthesis service.
"""

from __future__ import annotations

import asyncio
import io
import logging
import wave
from typing import Optional

import numpy as np
import soundfile as sf

from voicemix.errors import DecodeError
from .asset import PcmAsset


logger = logging.getLogger("voicemix.pcm")

INT16_NEG_SCALE = 32768.0
INT16_POS_SCALE = 32767.0


def float_to_int16(samples: np.ndarray) -> np.ndarray:
    """Quantize floats: negatives scale by 32768, non-negatives by 32767. No dither."""
    data = np.asarray(samples, dtype=np.float64)
    if not np.isfinite(data).all():
        data = np.nan_to_num(data, nan=0.0, posinf=1.0, neginf=-1.0)
    data = np.clip(data, -1.0, 1.0)
    scaled = np.where(data < 0, data * INT16_NEG_SCALE, data * INT16_POS_SCALE)
    return np.clip(np.round(scaled), -32768, 32767).astype("<i2")


def int16_to_float(samples: np.ndarray) -> np.ndarray:
    """Exact inverse of the `float_to_int16` scaling."""
    data = np.asarray(samples, dtype=np.float64)
    return np.where(data < 0, data / INT16_NEG_SCALE, data / INT16_POS_SCALE).astype(np.float32)


def encode_wav(asset: PcmAsset) -> bytes:
    """
    Serialize a PCM asset as 16-bit PCM WAV bytes.

    Encoding the same buffer twice yields byte-identical output.
    """
    pcm = float_to_int16(asset.interleaved())
    buf = io.BytesIO()
    with wave.open(buf, "wb") as wf:
        wf.setnchannels(asset.channel_count)
        wf.setsampwidth(2)
        wf.setframerate(asset.sample_rate)
        wf.writeframes(np.ascontiguousarray(pcm).tobytes())
    return buf.getvalue()


def decode_audio(
    data: bytes,
    sample_rate: Optional[int] = None,
    channels: Optional[int] = None,
    label: str = "",
) -> PcmAsset:
    """
    Decode encoded audio bytes into a PcmAsset.

    Args:
        data: Raw encoded bytes (WAV, FLAC, OGG, MP3, ...)
        sample_rate: Optional target rate; resampled when different
        channels: Optional target channel count
        label: Name carried by the asset for logging

    Raises:
        DecodeError: If the bytes are empty, malformed or unsupported
    """
    if not data:
        raise DecodeError("No audio bytes to decode")

    try:
        asset = _decode_with_soundfile(data, label)
    except (RuntimeError, TypeError) as sf_exc:
        logger.debug("libsndfile could not read %s (%s); trying ffmpeg", label or "audio", sf_exc)
        asset = _decode_with_pydub(data, label)

    if sample_rate is not None:
        asset = asset.resampled(sample_rate)
    if channels is not None:
        asset = asset.with_channels(channels)
    logger.debug("Decoded %r", asset)
    return asset


async def decode_audio_async(
    data: bytes,
    sample_rate: Optional[int] = None,
    channels: Optional[int] = None,
    label: str = "",
) -> PcmAsset:
    """Run `decode_audio` in a worker thread."""
    return await asyncio.to_thread(decode_audio, data, sample_rate, channels, label)


def _decode_with_soundfile(data: bytes, label: str) -> PcmAsset:
    with sf.SoundFile(io.BytesIO(data)) as f:
        rate = f.samplerate
        if f.subtype == "PCM_16":
            frames = f.read(dtype="int16", always_2d=True)
            samples = int16_to_float(frames)
        else:
            samples = f.read(dtype="float32", always_2d=True)
    return PcmAsset.from_interleaved(samples, rate, label=label)


def _decode_with_pydub(data: bytes, label: str) -> PcmAsset:
    from pydub import AudioSegment

    try:
        seg = AudioSegment.from_file(io.BytesIO(data))
    except Exception as exc:
        raise DecodeError(f"Unsupported or malformed audio bytes for {label or 'asset'}: {exc}") from exc

    raw = np.array(seg.get_array_of_samples())
    frames = raw.reshape(-1, seg.channels)
    if seg.sample_width == 2:
        samples = int16_to_float(frames)
    else:
        full_scale = float(2 ** (8 * seg.sample_width - 1))
        samples = (frames.astype(np.float64) / full_scale).astype(np.float32)
    return PcmAsset.from_interleaved(samples, seg.frame_rate, label=label)
