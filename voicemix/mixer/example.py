"""
Example usage of the AudioMixer.
"""

import logging
from pathlib import Path

from voicemix.mixer import AudioMixer, MixConfig
from voicemix.pcm import decode_audio


def main():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")

    speech = decode_audio(Path("speech.wav").read_bytes(), label="speech")
    music = decode_audio(Path("music.wav").read_bytes(), label="music")
    effect = decode_audio(Path("break.wav").read_bytes(), label="break")

    config = MixConfig(
        intro_duration=12.0,
        intro_fade_duration=6.0,
        fade_type='exponential',
        music_volume=0.35,
        speech_volume=0.9,
        outro_enabled=True,
        outro_fade_in_duration=8.0,
        outro_duration=12.0,
        outro_fade_out_duration=4.0,
        break_gain=0.5,
    )

    markup = 'Take a deep breath. <break time="3s"/> And slowly let it out. <break/> Good.'

    mixer = AudioMixer(config)
    result = mixer.mix(speech, markup_text=markup, music=music, break_effect=effect)
    out = result.save("mixed.wav")
    print(f"Mixed file saved to: {out} ({result.duration_seconds:.1f}s, breaks at "
          f"{[round(m.position, 2) for m in result.markers]})")


if __name__ == "__main__":
    main()
