"""Gamebox identifiers."""

from .models import Identifier, IdentifierKind
from .resolver import IdentifierResolver

__all__ = ["Identifier", "IdentifierKind", "IdentifierResolver"]
