"""
Tests for SSML markup generation.
"""

import pytest

from voicemix.breaks import parse_breaks
from voicemix.speech import VOICE_PRESETS, build_ssml, escape_text, prosody_pitch, prosody_rate


def test_energetic_preset_markup():
    ssml = build_ssml('Tom & Jerry <break time="1s"/> run', preset="energetic")

    assert ssml.startswith('<speak version="1.0"')
    assert '<voice name="en-US-AriaNeural">' in ssml
    assert '<mstts:express-as style="excited">' in ssml
    assert 'rate="0%"' in ssml
    assert 'pitch="0%"' in ssml
    assert 'volume="100%"' in ssml
    assert 'Tom &amp; Jerry <break time="1s"/> run' in ssml
    assert ssml.endswith('</speak>')


def test_markup_keeps_breaks_for_the_parser():
    ssml = build_ssml('Tom & Jerry <break time="1s"/> run')
    markers = parse_breaks(ssml)
    assert len(markers) == 1
    assert markers[0].position == pytest.approx(3 / 2.5)
    assert markers[0].duration == 1.0


def test_calm_preset_volume():
    assert 'volume="90%"' in build_ssml("hello", preset="calm")


def test_speaker_prefix():
    assert "Speaking as narrator: hello" in build_ssml("hello", speaker_id="narrator")
    assert "Speaking as" not in build_ssml("hello", speaker_id="default")


def test_unknown_preset_raises():
    with pytest.raises(ValueError):
        build_ssml("hello", preset="whisper")


@pytest.mark.parametrize("rate, expected", [(1.3, "+20%"), (1.2, "0%"), (0.8, "0%"), (0.7, "-20%")])
def test_prosody_rate(rate, expected):
    assert prosody_rate(rate) == expected


@pytest.mark.parametrize("pitch, expected", [(1.2, "+10%"), (1.0, "0%"), (0.85, "-10%")])
def test_prosody_pitch(pitch, expected):
    assert prosody_pitch(pitch) == expected


def test_escape_text_leaves_only_break_tags():
    assert escape_text('<b>x</b> <break/> 1 < 2') == '&lt;b&gt;x&lt;/b&gt; <break/> 1 &lt; 2'


def test_all_presets_render():
    for name in VOICE_PRESETS:
        assert "<prosody" in build_ssml("hi", preset=name)
