"""
Tests for the async MixService and the asset loader.
"""

import asyncio

import pytest
import requests

from voicemix.assets import AssetLoader, LoaderConfig
from voicemix.errors import AssetLoadError
from voicemix.mixer import AudioMixer, MixConfig
from voicemix.pcm import encode_wav
from voicemix.pipeline import MixRequest, MixService, MixServiceConfig
from voicemix.render import renderer


class MemoryLoader(AssetLoader):
    """Serves asset bytes from a dict instead of disk or network."""

    def __init__(self, files):
        super().__init__()
        self.files = files
        self.requested = []

    def load_bytes(self, location):
        self.requested.append(location)
        if location not in self.files:
            raise AssetLoadError(f"Asset not found: {location}")
        return self.files[location]


class FakeResponse:
    def __init__(self, chunks, status=200):
        self.chunks = chunks
        self.status = status

    def raise_for_status(self):
        if self.status >= 400:
            raise requests.HTTPError(f"{self.status} error")

    def iter_content(self, chunk_size=1):
        return iter(self.chunks)


class FakeSession:
    def __init__(self, response=None, error=None):
        self.headers = {}
        self.response = response
        self.error = error

    def get(self, url, stream=False, timeout=None):
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def files(dc_music):
    return {"music.wav": encode_wav(dc_music)}


def run(service, request):
    return asyncio.run(service.run(request))


def test_successful_mix(files, dc_speech, simple_config):
    service = MixService(loader=MemoryLoader(files))
    request = MixRequest(speech_bytes=encode_wav(dc_speech), config=simple_config, music="music.wav")

    result = run(service, request)

    assert result.status == "ok"
    assert result.ok
    assert not result.mix.bypassed
    assert result.mix.asset.frames == 60000
    assert result.to_dict()["mix"]["timeline"]["speech_start"] == 3.0


def test_missing_intro_falls_back_to_speech(dc_speech, simple_config):
    service = MixService(loader=MemoryLoader({}))
    request = MixRequest(speech_bytes=encode_wav(dc_speech), config=simple_config)

    result = run(service, request)

    assert result.status == "fallback"
    assert result.ok
    assert result.stage == "config"
    assert result.mix.bypassed
    assert result.mix.asset.frames == dc_speech.frames


def test_fallback_can_be_disabled(dc_speech, simple_config):
    service = MixService(loader=MemoryLoader({}), config=MixServiceConfig(fallback_to_speech=False))
    result = run(service, MixRequest(speech_bytes=encode_wav(dc_speech), config=simple_config))

    assert result.status == "error"
    assert not result.ok
    assert result.mix is None
    assert result.stage == "config"


def test_undecodable_speech_reports_decode_stage(files, simple_config):
    service = MixService(loader=MemoryLoader(files))
    result = run(service, MixRequest(speech_bytes=b"", config=simple_config, music="music.wav"))

    assert result.status == "error"
    assert result.stage == "decode"


def test_missing_asset_reports_assets_stage(dc_speech, simple_config):
    service = MixService(loader=MemoryLoader({}))
    request = MixRequest(speech_bytes=encode_wav(dc_speech), config=simple_config, intro="nowhere.wav")

    result = run(service, request)

    assert result.status == "error"
    assert result.stage == "assets"
    assert "nowhere.wav" in result.detail


def test_disabled_mix_skips_asset_loading(dc_speech):
    loader = MemoryLoader({})
    service = MixService(loader=loader)
    request = MixRequest(
        speech_bytes=encode_wav(dc_speech),
        config=MixConfig(enabled=False),
        music="missing.wav",
    )

    result = run(service, request)

    assert result.status == "ok"
    assert result.mix.bypassed
    assert loader.requested == []


def test_busy_mixer_reports_mixer_stage(files, dc_speech, simple_config):
    mixer = AudioMixer(simple_config)
    service = MixService(loader=MemoryLoader(files), mixer=mixer)
    request = MixRequest(speech_bytes=encode_wav(dc_speech), config=simple_config, music="music.wav")

    mixer._busy.acquire()
    try:
        result = run(service, request)
    finally:
        mixer._busy.release()

    assert result.status == "error"
    assert result.stage == "mixer"


def test_request_ids_are_unique():
    assert MixRequest(b"x").request_id != MixRequest(b"x").request_id


# ---------------------
# Asset loader
# ---------------------
def test_loader_reads_relative_paths_from_base_dir(tmp_path, dc_music):
    (tmp_path / "bed.wav").write_bytes(encode_wav(dc_music))
    loader = AssetLoader(LoaderConfig(base_dir=str(tmp_path)))

    asset = asyncio.run(loader.load("bed.wav"))

    assert asset.label == "bed.wav"
    assert asset.frames == dc_music.frames


def test_loader_missing_file_raises(tmp_path):
    loader = AssetLoader(LoaderConfig(base_dir=str(tmp_path)))
    with pytest.raises(AssetLoadError):
        loader.load_bytes("absent.wav")


def test_loader_downloads_urls():
    session = FakeSession(response=FakeResponse([b"abc", b"", b"def"]))
    loader = AssetLoader(session=session)

    assert loader.load_bytes("https://example.com/intro.mp3") == b"abcdef"
    assert session.headers["User-Agent"].startswith("voicemix/")


@pytest.mark.parametrize(
    "session",
    [
        FakeSession(error=requests.ConnectionError("unreachable")),
        FakeSession(response=FakeResponse([], status=404)),
    ],
)
def test_loader_download_failures_raise(session):
    loader = AssetLoader(session=session)
    with pytest.raises(AssetLoadError):
        loader.load_bytes("http://example.com/missing.wav")


def test_directory_location_reports_assets_stage(tmp_path, dc_speech, simple_config):
    (tmp_path / "beds").mkdir()
    service = MixService(loader=AssetLoader(LoaderConfig(base_dir=str(tmp_path))))
    request = MixRequest(speech_bytes=encode_wav(dc_speech), config=simple_config, music="beds")

    result = run(service, request)

    assert result.status == "error"
    assert result.stage == "assets"
    assert result.mix is None


def test_render_failure_reports_render_stage(monkeypatch, files, dc_speech, simple_config):
    def out_of_memory(*args, **kwargs):
        raise MemoryError("cannot allocate mix bus")

    monkeypatch.setattr(renderer, "_mix_track", out_of_memory)
    service = MixService(loader=MemoryLoader(files))
    request = MixRequest(speech_bytes=encode_wav(dc_speech), config=simple_config, music="music.wav")

    result = run(service, request)

    assert result.status == "error"
    assert result.stage == "render"
    assert result.mix is None
    assert not service.mixer.is_busy
