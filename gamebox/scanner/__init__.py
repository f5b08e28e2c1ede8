"""Resource discovery for gamebox trees."""

from .models import ResourceSet, ScanResult, VolumeKind
from .service import ResourceScanner, matches_any

__all__ = ["ResourceScanner", "ResourceSet", "ScanResult", "VolumeKind", "matches_any"]
