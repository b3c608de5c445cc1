"""
Decoded multichannel PCM buffer.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np


@dataclass(frozen=True, eq=False)
class PcmAsset:
    """
    Immutable float PCM buffer.

    Attributes:
        samples: Array of shape (channels, frames), float32, nominally in [-1, 1]
        sample_rate: Samples per second per channel
    """

    samples: np.ndarray
    sample_rate: int
    label: str = field(default="", compare=False)

    def __post_init__(self):
        data = np.array(self.samples, dtype=np.float32, copy=True)
        if data.ndim == 1:
            data = data[np.newaxis, :]
        if data.ndim != 2 or data.shape[0] < 1:
            raise ValueError(f"PCM samples must be 1D or (channels, frames), got shape {data.shape}")
        if int(self.sample_rate) <= 0:
            raise ValueError(f"Sample rate must be positive, got {self.sample_rate}")
        data.flags.writeable = False
        object.__setattr__(self, "samples", data)
        object.__setattr__(self, "sample_rate", int(self.sample_rate))

    @classmethod
    def from_interleaved(cls, data: np.ndarray, sample_rate: int, label: str = "") -> "PcmAsset":
        """Build from a (frames, channels) array as returned by soundfile."""
        arr = np.asarray(data)
        if arr.ndim == 1:
            return cls(arr, sample_rate, label=label)
        return cls(arr.T, sample_rate, label=label)

    @classmethod
    def silent(cls, duration_seconds: float, sample_rate: int, channels: int = 1) -> "PcmAsset":
        frames = max(0, int(round(duration_seconds * sample_rate)))
        return cls(np.zeros((channels, frames), dtype=np.float32), sample_rate, label="silence")

    @property
    def channel_count(self) -> int:
        return int(self.samples.shape[0])

    @property
    def frames(self) -> int:
        return int(self.samples.shape[1])

    @property
    def duration_seconds(self) -> float:
        return self.frames / float(self.sample_rate)

    @property
    def is_empty(self) -> bool:
        return self.frames == 0

    def copy(self) -> "PcmAsset":
        """Return an independent copy for use in another rendering context."""
        return PcmAsset(self.samples, self.sample_rate, label=self.label)

    def mono(self) -> np.ndarray:
        """Average all channels into a single float64 signal."""
        return self.samples.astype(np.float64).mean(axis=0)

    def interleaved(self) -> np.ndarray:
        """Return a (frames, channels) view, the layout WAV files use."""
        return self.samples.T

    def resampled(self, sample_rate: int) -> "PcmAsset":
        """Linear-interpolation resample; returns self when rates already match."""
        sample_rate = int(sample_rate)
        if sample_rate == self.sample_rate:
            return self
        if self.frames == 0:
            return PcmAsset(self.samples, sample_rate, label=self.label)
        out_frames = int(round(self.frames * sample_rate / float(self.sample_rate)))
        src_t = np.arange(self.frames, dtype=np.float64) / self.sample_rate
        dst_t = np.arange(out_frames, dtype=np.float64) / sample_rate
        channels = [np.interp(dst_t, src_t, ch) for ch in self.samples]
        return PcmAsset(np.vstack(channels), sample_rate, label=self.label)

    def __repr__(self) -> str:
        return (
            f"PcmAsset(label={self.label!r}, channels={self.channel_count}, "
            f"sample_rate={self.sample_rate}, duration={self.duration_seconds:.3f}s)"
        )

    def with_channels(self, channel_count: int) -> "PcmAsset":
        """
        Map onto `channel_count` channels.

        Fewer source channels are repeated cyclically (mono is duplicated to
        every output channel); excess source channels are dropped.
        """
        if channel_count <= 0:
            raise ValueError(f"Channel count must be positive, got {channel_count}")
        if channel_count == self.channel_count:
            return self
        index = np.arange(channel_count) % self.channel_count
        return PcmAsset(self.samples[index], self.sample_rate, label=self.label)
