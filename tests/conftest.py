"""
Shared pytest fixtures and signal builders for voicemix tests.

All audio is synthesized in memory; no media files or network access.
"""

import numpy as np
import pytest

from voicemix.mixer import MixConfig
from voicemix.pcm import PcmAsset


SR = 44100
LOW_SR = 8000


def tone(duration, freq=440.0, amp=0.5, sr=SR, channels=1):
    t = np.arange(int(round(duration * sr))) / sr
    sig = amp * np.sin(2 * np.pi * freq * t)
    return np.tile(sig, (channels, 1))


def silence(duration, sr=SR, channels=1):
    return np.zeros((channels, int(round(duration * sr))))


def dc(duration, level, sr=LOW_SR, channels=1):
    return np.full((channels, int(round(duration * sr))), level)


def make_asset(*parts, sr=SR, label=""):
    return PcmAsset(np.concatenate(parts, axis=1), sr, label=label)


@pytest.fixture
def tone_gap_tone():
    """1 s tone, 1 s digital silence, 1 s tone (mono, 44.1 kHz)."""
    return make_asset(tone(1.0), silence(1.0), tone(1.0), label="tone_gap_tone")


@pytest.fixture
def dc_speech():
    """3 s of constant 0.25 at 8 kHz; trivially predictable after mixing."""
    return make_asset(dc(3.0, 0.25), sr=LOW_SR, label="speech")


@pytest.fixture
def dc_music():
    return make_asset(dc(30.0, 1.0), sr=LOW_SR, label="music")


@pytest.fixture
def simple_config():
    return MixConfig(
        intro_duration=2.0,
        intro_fade_duration=2.0,
        fade_type='linear',
        music_volume=0.5,
        speech_volume=1.0,
        outro_enabled=False,
        break_sound_enabled=False,
    )
