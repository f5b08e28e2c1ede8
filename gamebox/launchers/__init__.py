"""Launcher shortcuts for gamebox programs."""

from .models import Launcher
from .registry import ChangeCallback, LauncherRegistry

__all__ = ["Launcher", "LauncherRegistry", "ChangeCallback"]
