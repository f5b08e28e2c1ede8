"""Documentation folder management for gamebox packages."""

from .service import (
    DOCUMENTATION_FOLDER_NAME,
    ConflictBehaviour,
    DocumentationSynchronizer,
    PopulationReport,
)
from .trash import Trash

__all__ = [
    "DOCUMENTATION_FOLDER_NAME",
    "ConflictBehaviour",
    "DocumentationSynchronizer",
    "PopulationReport",
    "Trash",
]
