"""Directory-backed gamebox packages.

A gamebox bundles a DOS program's executables, drive volumes, emulator
configuration, launchers and documentation in one folder. :class:`Gamebox`
is the entry point; the subpackages expose the individual components.
"""

from .documentation import ConflictBehaviour
from .errors import ErrorCode, GameboxError
from .identity import Identifier, IdentifierKind
from .launchers import Launcher
from .package import Gamebox

__all__: list[str] = [
    "ConflictBehaviour",
    "ErrorCode",
    "Gamebox",
    "GameboxError",
    "Identifier",
    "IdentifierKind",
    "Launcher",
]
