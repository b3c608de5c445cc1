"""
Asset loading: fetch intro/outro/effect bytes by location and decode them.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional
import asyncio
import logging

import requests

from voicemix.errors import AssetLoadError
from voicemix.pcm import PcmAsset, decode_audio_async
from .config import LoaderConfig


logger = logging.getLogger("voicemix.assets")


def resolve_asset(*candidates: Optional[PcmAsset]) -> Optional[PcmAsset]:
    """First candidate that is present and holds audio wins."""
    for candidate in candidates:
        if candidate is not None and not candidate.is_empty:
            return candidate
    return None


class AssetLoader:
    """Reads local files or http(s) URLs."""

    def __init__(self, config: Optional[LoaderConfig] = None, session: Optional[requests.Session] = None):
        self.config = config or LoaderConfig()
        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": self.config.user_agent})

    def load_bytes(self, location: str) -> bytes:
        """
        Read the raw encoded bytes behind a location reference.

        Raises:
            AssetLoadError: If the file is missing or the download fails
        """
        if location.startswith(("http://", "https://")):
            return self._download(location)

        path = Path(location).expanduser()
        if not path.is_absolute() and self.config.base_dir:
            path = Path(self.config.base_dir).expanduser() / path
        if not path.is_file():
            raise AssetLoadError(f"Asset not found: {path}")
        try:
            data = path.read_bytes()
        except OSError as exc:
            raise AssetLoadError(f"Could not read asset {path}: {exc}") from exc
        logger.debug("Read %d bytes from %s", len(data), path)
        return data

    async def load(self, location: str, label: str = "") -> PcmAsset:
        """Fetch and decode one asset."""
        data = await asyncio.to_thread(self.load_bytes, location)
        asset = await decode_audio_async(data, label=label or Path(location).name)
        logger.info("Loaded %r from %s", asset, location)
        return asset

    def _download(self, url: str) -> bytes:
        try:
            resp = self.session.get(url, stream=True, timeout=self.config.timeout)
            resp.raise_for_status()
            chunks = [c for c in resp.iter_content(chunk_size=self.config.chunk_size) if c]
        except requests.RequestException as exc:
            logger.error("Failed to download asset %s: %s", url, exc)
            raise AssetLoadError(f"Failed to download asset {url}: {exc}") from exc
        data = b"".join(chunks)
        logger.debug("Downloaded %d bytes from %s", len(data), url)
        return data
