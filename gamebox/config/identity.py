"""Identifier resolution configuration models."""

from __future__ import annotations

import hashlib

from pydantic import Field, field_validator

from gamebox.config.base import BaseConfig


class IdentifierConfig(BaseConfig):
    """Settings for deriving gamebox identifiers from executables."""

    digest_algorithm: str = Field("sha1", description="hashlib algorithm used for executable digests")
    chunk_size: int = Field(64 * 1024, ge=1, description="Read size in bytes when hashing executables")

    @field_validator("digest_algorithm")
    @classmethod
    def _validate_algorithm(cls, value: str) -> str:
        algorithm = value.lower()
        if algorithm not in hashlib.algorithms_available:
            raise ValueError(f"Unsupported digest algorithm '{value}'")
        if algorithm.startswith("shake_"):
            raise ValueError("Variable-length digests are not supported")
        return algorithm


__all__ = ["IdentifierConfig"]
