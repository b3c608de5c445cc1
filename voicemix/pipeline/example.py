"""
Example usage of the async MixService.
"""

import asyncio
import json
import logging
from pathlib import Path

from voicemix.mixer import MixConfig
from voicemix.pipeline import MixRequest, MixService
from voicemix.speech import build_ssml


async def main():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")

    markup = build_ssml('Welcome back. <break time="2s"/> Let us begin.', preset="calm")
    request = MixRequest(
        speech_bytes=Path("speech.mp3").read_bytes(),
        markup_text=markup,
        config=MixConfig.from_env(base=MixConfig(intro_duration=8.0, intro_fade_duration=4.0)),
        music="assets/music.mp3",
        break_effect="assets/countdown.wav",
    )

    result = await MixService().run(request)
    print(json.dumps(result.to_dict(), indent=2))
    if result.mix is not None:
        result.mix.save("mixed.wav")


if __name__ == "__main__":
    asyncio.run(main())
