"""
Tests for gain envelopes and their per-track scheduling.
"""

import numpy as np
import pytest

from voicemix.mixer import MixConfig
from voicemix.timeline import (
    EXP_FLOOR,
    Breakpoint,
    EnvelopeBuilder,
    GainEnvelope,
    break_play_duration,
    build_break_envelope,
    build_envelope,
    build_timeline,
)


def reference(**overrides):
    values = dict(
        intro_duration=22.0,
        intro_fade_duration=7.0,
        music_volume=0.3,
        speech_volume=1.0,
        outro_fade_in_duration=10.0,
        outro_duration=15.0,
        outro_fade_out_duration=5.0,
    )
    values.update(overrides)
    cfg = MixConfig(**values)
    return cfg, build_timeline(cfg, 10.0)


# ---------------------
# Envelope evaluation
# ---------------------
def test_constant_envelope():
    env = GainEnvelope.constant(0.7)
    assert env.values_at(np.array([0.0, 5.0, 100.0])).tolist() == pytest.approx([0.7, 0.7, 0.7])


def test_step_holds_then_jumps():
    env = GainEnvelope((Breakpoint(0.0, 0.2, "step"), Breakpoint(1.0, 0.8, "step")))
    assert env.value_at(0.999) == pytest.approx(0.2)
    assert env.value_at(1.0) == pytest.approx(0.8)


def test_linear_ramp_reaches_target_at_breakpoint():
    env = GainEnvelope((Breakpoint(0.0, 0.0, "step"), Breakpoint(2.0, 1.0, "linear")))
    assert env.value_at(1.0) == pytest.approx(0.5)
    assert env.value_at(2.0) == pytest.approx(1.0)
    assert env.value_at(10.0) == pytest.approx(1.0)


@pytest.mark.parametrize(
    "points",
    [
        (),
        (Breakpoint(0.5, 1.0),),
        (Breakpoint(0.0, 1.0), Breakpoint(2.0, 0.5), Breakpoint(2.0, 0.0)),
        (Breakpoint(0.0, 1.0), Breakpoint(2.0, 0.5), Breakpoint(1.0, 0.0)),
        (Breakpoint(0.0, 2.0),),
        (Breakpoint(0.0, -0.1),),
    ],
)
def test_invalid_envelopes_are_rejected(points):
    with pytest.raises(ValueError):
        GainEnvelope(points)


def test_builder_nudges_coincident_times():
    env = EnvelopeBuilder(1.0).set(1.0, 1.0).ramp(1.0, 0.0).build()
    assert env.times == [0.0, 1.0, pytest.approx(1.0 + 1e-6)]
    assert env.values == [1.0, 1.0, 0.0]


def test_builder_skips_redundant_points_and_clamps_values():
    env = EnvelopeBuilder(3.0).set(0.0, 1.5).ramp(-1.0, -2.0).build()
    assert env.values == [1.5, 0.0]


# ---------------------
# Track envelopes
# ---------------------
def test_intro_linear_fade():
    cfg, tl = reference()
    env = build_envelope("intro", tl, cfg)

    assert env.value_at(0.0) == pytest.approx(0.3)
    assert env.value_at(22.0) == pytest.approx(0.3)
    assert env.value_at(25.5) == pytest.approx(0.15)
    assert env.value_at(29.0) == pytest.approx(0.0)
    assert env.value_at(40.0) == 0.0


def test_intro_exponential_fade_ends_silent():
    cfg, tl = reference(fade_type="exponential")
    env = build_envelope("intro", tl, cfg)

    assert env.value_at(22.0) == pytest.approx(0.3)
    assert env.value_at(25.5) == pytest.approx(np.sqrt(0.3 * EXP_FLOOR))
    assert env.value_at(29.0) == pytest.approx(EXP_FLOOR)
    assert env.value_at(29.001) == 0.0

    samples = env.values_at(np.linspace(22.0, 29.0, 200))
    assert np.all(np.diff(samples) <= 0)


def test_speech_rises_over_one_second():
    cfg, tl = reference(speech_volume=0.8)
    env = build_envelope("speech", tl, cfg)

    assert env.value_at(25.0) == 0.0
    assert env.value_at(25.5) == 0.0
    assert env.value_at(26.0) == pytest.approx(0.4)
    assert env.value_at(26.5) == pytest.approx(0.8)
    assert env.value_at(35.0) == pytest.approx(0.8)


def test_outro_rise_hold_and_fade():
    cfg, tl = reference()
    env = build_envelope("outro", tl, cfg)
    peak = 0.3 * 1.2

    assert env.value_at(20.0) == 0.0
    assert env.value_at(30.5) == pytest.approx(peak / 2)
    assert env.value_at(35.5) == pytest.approx(peak)
    assert env.value_at(45.5) == pytest.approx(peak)
    assert env.value_at(48.0) == pytest.approx(peak / 2)
    assert env.value_at(50.5) == pytest.approx(0.0)
    assert env.value_at(54.0) == 0.0


def test_outro_peak_is_capped_at_unity():
    cfg, tl = reference(music_volume=0.9)
    assert build_envelope("outro", tl, cfg).value_at(40.0) == pytest.approx(1.0)


def test_outro_envelope_requires_outro_stage():
    cfg, tl = reference(outro_enabled=False)
    with pytest.raises(ValueError):
        build_envelope("outro", tl, cfg)


def test_break_envelope_attack_and_decay():
    env = build_break_envelope(5.0, 1.0, 0.6)

    assert env.value_at(4.98) == 0.0
    assert env.value_at(4.995) == pytest.approx(0.3)
    assert env.value_at(5.0) == pytest.approx(0.6)
    assert env.value_at(5.5) == pytest.approx(0.3)
    assert env.value_at(6.0) == pytest.approx(0.0)


def test_break_envelope_at_time_zero_stays_valid():
    env = build_break_envelope(0.0, 0.5, 0.6)
    assert env.times[0] == 0.0
    assert env.value_at(0.25) == pytest.approx(0.3, abs=1e-4)


def test_break_track_requires_schedule():
    cfg, tl = reference()
    with pytest.raises(ValueError):
        build_envelope("break", tl, cfg)


def test_unknown_role_is_rejected():
    cfg, tl = reference()
    with pytest.raises(ValueError):
        build_envelope("drums", tl, cfg)


@pytest.mark.parametrize(
    "break_duration, effect_duration, expected",
    [(0.1, 3.0, 0.25), (2.0, 1.0, 1.0), (0.1, 0.2, 0.2), (1.5, 3.0, 1.5)],
)
def test_break_play_duration(break_duration, effect_duration, expected):
    assert break_play_duration(break_duration, effect_duration) == pytest.approx(expected)


@pytest.mark.parametrize("fade_type", ["linear", "exponential"])
@pytest.mark.parametrize(
    "overrides",
    [
        {},
        dict(intro_duration=0.0, intro_fade_duration=0.0),
        dict(outro_fade_in_duration=0.0, outro_duration=0.0, outro_fade_out_duration=0.0),
        dict(speech_rise_duration=0.0, music_volume=0.0),
        dict(outro_fade_in_duration=50.0, outro_fade_out_duration=30.0),
    ],
)
def test_track_envelopes_are_well_formed(fade_type, overrides):
    cfg, tl = reference(fade_type=fade_type, **overrides)
    for role in ("intro", "speech", "outro"):
        env = build_envelope(role, tl, cfg)
        times = env.times
        assert times[0] == 0.0
        assert all(b > a for a, b in zip(times, times[1:]))
        assert all(0.0 <= v <= 1.5 for v in env.values)
