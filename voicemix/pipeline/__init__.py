"""Pipeline package: DTOs and the async mix service."""

from .dto import MixRequest, MixResult
from .service import MixService, MixServiceConfig

__all__ = [
    "MixRequest",
    "MixResult",
    "MixService",
    "MixServiceConfig",
]
