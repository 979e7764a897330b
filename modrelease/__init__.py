"""Interactive release helper for Factorio mods."""

from .changelog import ChangelogEntry, ChangelogEntryResolver
from .cli import main
from .versioning import VersionNegotiator

__version__ = "1.0.0"

__all__ = ["ChangelogEntry", "ChangelogEntryResolver", "VersionNegotiator", "main"]
