"""
Audio Mixer

Frames synthesized speech with intro and outro music beds and break sound
effects, rendered offline into a single 16-bit PCM WAV.

Example:
    >>> from voicemix.mixer import AudioMixer, MixConfig
    >>> from voicemix.pcm import decode_audio
    >>> speech = decode_audio(open("speech.wav", "rb").read())
    >>> music = decode_audio(open("music.wav", "rb").read())
    >>> mixer = AudioMixer(MixConfig(intro_duration=10.0, music_volume=0.4))
    >>> result = mixer.mix(speech, markup_text=ssml, music=music)
    >>> result.save("mixed.wav")
"""

from .config import MixConfig, FadeType
from .mixer import AudioMixer, RenderedMix

__all__ = [
    'MixConfig',
    'FadeType',
    'AudioMixer',
    'RenderedMix',
]
