"""
Offline rendering of scheduled, enveloped tracks into one PCM buffer.

Example:
    >>> from voicemix.render import Track, render
    >>> from voicemix.timeline import GainEnvelope
    >>> mix = render([Track(speech, GainEnvelope.constant(1.0))], 5.0, 44100, 2)
"""

from .renderer import Track, output_frames, render

__all__ = [
    'Track',
    'output_frames',
    'render',
]
