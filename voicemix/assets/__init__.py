"""
Asset Loading

Fetches intro, outro and break-effect audio by location reference (local path
or http(s) URL) and decodes it into PCM assets.

Example:
    >>> from voicemix.assets import AssetLoader, resolve_asset
    >>> loader = AssetLoader()
    >>> intro = await loader.load("assets/intro.mp3")
    >>> bed = resolve_asset(None, intro)
"""

from .config import LoaderConfig
from .loader import AssetLoader, resolve_asset

__all__ = [
    'LoaderConfig',
    'AssetLoader',
    'resolve_asset',
]
