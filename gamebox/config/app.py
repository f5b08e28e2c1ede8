"""Application-level configuration models."""

from __future__ import annotations

from typing import Literal

from pydantic import Field

from gamebox.config.base import BaseConfig
from gamebox.config.documentation import DocumentationConfig
from gamebox.config.identity import IdentifierConfig
from gamebox.config.scan import ScanConfig


class AppConfig(BaseConfig):
    """Top-level runtime configuration for gamebox tooling."""

    logging_level: Literal["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR"] = Field(
        "INFO", description="Log level: DEBUG, INFO, WARNING, ERROR"
    )
    scan: ScanConfig = Field(default_factory=ScanConfig, description="Resource classification rules")
    documentation: DocumentationConfig = Field(
        default_factory=DocumentationConfig,
        description="Documentation folder behaviour",
    )
    identifier: IdentifierConfig = Field(
        default_factory=IdentifierConfig,
        description="Identifier derivation settings",
    )


__all__ = ["AppConfig"]
