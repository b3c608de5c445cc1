"""
PCM assets and the WAV codec.

Example:
    >>> from voicemix.pcm import PcmAsset, encode_wav, decode_audio
    >>> asset = PcmAsset.silent(1.0, sample_rate=44100, channels=2)
    >>> data = encode_wav(asset)
    >>> decode_audio(data).duration_seconds
    1.0
"""

from .asset import PcmAsset
from .codec import (
    decode_audio,
    decode_audio_async,
    encode_wav,
    float_to_int16,
    int16_to_float,
)

__all__ = [
    'PcmAsset',
    'decode_audio',
    'decode_audio_async',
    'encode_wav',
    'float_to_int16',
    'int16_to_float',
]
