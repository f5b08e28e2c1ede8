"""Game-info metadata for gamebox packages."""

from .models import GameInfo, GameInfoKey
from .store import InMemoryMetadataStore, MetadataStore, PlistMetadataStore

__all__ = [
    "GameInfo",
    "GameInfoKey",
    "MetadataStore",
    "InMemoryMetadataStore",
    "PlistMetadataStore",
]
