"""Typed failures raised by the mixing engine.

Every error carries the name of the stage that failed so callers can decide
on user-visible messaging without parsing exception text.
"""

from __future__ import annotations


class MixError(Exception):
    """Base class for all mixing failures."""

    stage: str = "mix"

    def __init__(self, message: str, stage: str | None = None):
        super().__init__(message)
        if stage is not None:
            self.stage = stage


class ConfigurationError(MixError):
    """Mixing was requested with an unusable configuration or missing intro."""

    stage = "config"


class DecodeError(MixError):
    """Encoded audio bytes could not be turned into a PCM asset."""

    stage = "decode"


class RenderError(MixError):
    """The offline render failed; no partial output is returned."""

    stage = "render"


class MixerBusyError(MixError):
    """A mix request reached a mixer that is already rendering."""

    stage = "mixer"


class AssetLoadError(MixError):
    """A location reference could not be read."""

    stage = "assets"
