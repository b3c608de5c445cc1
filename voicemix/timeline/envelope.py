"""
Gain envelopes: piecewise volume curves scheduled against the timeline.

A breakpoint's curve describes how the gain travels from the previous
breakpoint to it: `step` holds the previous value and jumps at the breakpoint,
`linear` and `exponential` ramp so the value is reached exactly at its time.
After the last breakpoint the gain stays at the last value.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Literal, Optional, Tuple
import logging

import numpy as np

from .timeline import Timeline

if TYPE_CHECKING:
    from voicemix.mixer.config import MixConfig


logger = logging.getLogger("voicemix.timeline")

Curve = Literal["step", "linear", "exponential"]
TrackRole = Literal["intro", "speech", "outro", "break"]

MAX_GAIN = 1.5
# exponential ramps cannot reach 0
EXP_FLOOR = 0.0001
# smallest gap between breakpoints that land on the same instant
MIN_SPACING = 1e-6
BREAK_ATTACK = 0.01
MIN_BREAK_PLAY = 0.25


@dataclass(frozen=True)
class Breakpoint:
    time: float
    value: float
    curve: Curve = "linear"


@dataclass(frozen=True)
class GainEnvelope:
    """Ordered breakpoints; times strictly increasing, the first at 0."""

    breakpoints: Tuple[Breakpoint, ...]

    def __post_init__(self):
        points = tuple(self.breakpoints)
        if not points:
            raise ValueError("Gain envelope needs at least one breakpoint")
        if points[0].time != 0.0:
            raise ValueError(f"First breakpoint must be at time 0, got {points[0].time}")
        for prev, cur in zip(points, points[1:]):
            if cur.time <= prev.time:
                raise ValueError(f"Breakpoint times must increase: {prev.time} -> {cur.time}")
        for p in points:
            if not 0.0 <= p.value <= MAX_GAIN:
                raise ValueError(f"Gain {p.value} outside [0, {MAX_GAIN}]")
        object.__setattr__(self, "breakpoints", points)

    @classmethod
    def constant(cls, value: float) -> "GainEnvelope":
        return cls((Breakpoint(0.0, value, "step"),))

    @property
    def times(self) -> List[float]:
        return [p.time for p in self.breakpoints]

    @property
    def values(self) -> List[float]:
        return [p.value for p in self.breakpoints]

    def value_at(self, t: float) -> float:
        return float(self.values_at(np.array([t], dtype=np.float64))[0])

    def values_at(self, times: np.ndarray) -> np.ndarray:
        """Evaluate the envelope at absolute times (seconds)."""
        times = np.asarray(times, dtype=np.float64)
        points = self.breakpoints
        out = np.full(times.shape, points[-1].value, dtype=np.float64)
        out[times < points[0].time] = points[0].value
        for p0, p1 in zip(points, points[1:]):
            mask = (times >= p0.time) & (times < p1.time)
            if not mask.any():
                continue
            if p1.curve == "step":
                out[mask] = p0.value
                continue
            frac = (times[mask] - p0.time) / (p1.time - p0.time)
            if p1.curve == "exponential":
                a = max(p0.value, EXP_FLOOR)
                b = max(p1.value, EXP_FLOOR)
                out[mask] = a * np.power(b / a, frac)
            else:
                out[mask] = p0.value + (p1.value - p0.value) * frac
        return out


class EnvelopeBuilder:
    """Accumulates breakpoints the way an automation lane is scheduled."""

    def __init__(self, initial: float):
        self._points: List[Breakpoint] = [Breakpoint(0.0, _clamp_gain(initial), "step")]

    def set(self, time: float, value: float) -> "EnvelopeBuilder":
        return self._add(time, value, "step")

    def ramp(self, time: float, value: float, curve: Curve = "linear") -> "EnvelopeBuilder":
        if curve == "exponential":
            value = max(value, EXP_FLOOR)
        return self._add(time, value, curve)

    def build(self) -> GainEnvelope:
        return GainEnvelope(tuple(self._points))

    def _add(self, time: float, value: float, curve: Curve) -> "EnvelopeBuilder":
        value = _clamp_gain(value)
        time = max(0.0, float(time))
        last = self._points[-1]
        if time <= last.time:
            if value == last.value:
                return self
            time = last.time + MIN_SPACING
        self._points.append(Breakpoint(time, value, curve))
        return self


def _clamp_gain(value: float) -> float:
    return min(max(float(value), 0.0), MAX_GAIN)


def break_play_duration(break_duration: float, effect_duration: float) -> float:
    """Clamp a break's length to [0.25 s, effect length]."""
    return min(max(break_duration, MIN_BREAK_PLAY), effect_duration)


def build_break_envelope(break_start: float, play_duration: float, gain: float) -> GainEnvelope:
    """Silent until just before the break, then a hit at `gain` that decays to 0."""
    return (
        EnvelopeBuilder(0.0)
        .set(break_start - BREAK_ATTACK, 0.0)
        .ramp(break_start, gain)
        .ramp(break_start + play_duration, 0.0)
        .build()
    )


def build_envelope(
    track: TrackRole,
    timeline: Timeline,
    config: "MixConfig",
    break_start: Optional[float] = None,
    play_duration: Optional[float] = None,
) -> GainEnvelope:
    """
    Build the gain envelope for one track of the mix.

    Args:
        track: 'intro', 'speech', 'outro' or 'break'
        timeline: Timeline from `build_timeline`
        config: Mix configuration supplying volumes and fade shape
        break_start: Absolute start of the break effect (break tracks only)
        play_duration: How long the break effect sounds (break tracks only)
    """
    if track == "intro":
        fade_curve: Curve = "exponential" if config.fade_type == "exponential" else "linear"
        builder = (
            EnvelopeBuilder(config.music_volume)
            .set(timeline.fade_start, config.music_volume)
            .ramp(timeline.fade_end, 0.0, fade_curve)
        )
        if fade_curve == "exponential":
            builder.set(timeline.fade_end + MIN_SPACING, 0.0)
        envelope = builder.build()
    elif track == "speech":
        envelope = (
            EnvelopeBuilder(0.0)
            .set(timeline.speech_start, 0.0)
            .ramp(timeline.speech_start + config.speech_rise_duration, config.speech_volume)
            .build()
        )
    elif track == "outro":
        if not timeline.has_outro:
            raise ValueError("Timeline has no outro stage")
        peak = min(1.0, config.music_volume * config.outro_boost)
        envelope = (
            EnvelopeBuilder(0.0)
            .set(timeline.outro_fade_in_start, 0.0)
            .ramp(timeline.outro_fade_in_end, peak)
            .ramp(timeline.outro_hold_end, peak)
            .ramp(timeline.outro_fade_out_end, 0.0)
            .build()
        )
    elif track == "break":
        if break_start is None or play_duration is None:
            raise ValueError("Break envelopes need break_start and play_duration")
        envelope = build_break_envelope(break_start, play_duration, config.break_gain)
    else:
        raise ValueError(f"Unknown track role: {track}")

    logger.debug(
        "Envelope %s: %s",
        track,
        " ".join(f"{p.time:.3f}:{p.value:.4f}/{p.curve}" for p in envelope.breakpoints),
    )
    return envelope
