"""Configuration namespace for gamebox."""

from __future__ import annotations

from .app import AppConfig
from .base import BaseConfig, load_config
from .documentation import DocumentationConfig
from .identity import IdentifierConfig
from .scan import ScanConfig

__all__ = [
    "BaseConfig",
    "AppConfig",
    "load_config",
    "DocumentationConfig",
    "IdentifierConfig",
    "ScanConfig",
]
