"""
Configuration for asset loading.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass
class LoaderConfig:
    """
    Attributes:
        base_dir: Directory relative file references resolve against
        timeout: HTTP timeout in seconds
        chunk_size: Streaming chunk size for HTTP downloads
        user_agent: User-Agent header sent with HTTP requests
    """

    base_dir: Optional[str] = None
    timeout: float = 30.0
    chunk_size: int = 8192
    user_agent: str = "voicemix/0.1"
