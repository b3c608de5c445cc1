"""
voicemix - offline mixing engine for a text-to-speech tester.

Builds a sample-accurate timeline around a synthesized speech waveform:
intro music that fades under the voice, an optional outro bed, and break
sound effects placed at the pauses written in the SSML markup. The result is
rendered offline and serialized to 16-bit PCM WAV.

Example:
    >>> from voicemix import AudioMixer, MixConfig
    >>> mixer = AudioMixer(MixConfig(intro_duration=5.0))
    >>> result = mixer.mix(speech, markup_text=text, intro=music)
    >>> result.save("mixed.wav")
"""

from .errors import (
    AssetLoadError,
    ConfigurationError,
    DecodeError,
    MixError,
    MixerBusyError,
    RenderError,
)
from .pcm import PcmAsset, decode_audio, encode_wav
from .mixer import AudioMixer, MixConfig, RenderedMix

__all__ = [
    'AudioMixer',
    'MixConfig',
    'RenderedMix',
    'PcmAsset',
    'decode_audio',
    'encode_wav',
    'MixError',
    'ConfigurationError',
    'DecodeError',
    'RenderError',
    'MixerBusyError',
    'AssetLoadError',
]

__version__ = '0.1.0'
