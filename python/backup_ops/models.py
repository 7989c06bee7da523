"""
Value objects passed between the collector, the resolver and the writer.
"""

from dataclasses import dataclass, field
from typing import List, Tuple


@dataclass(frozen=True)
class Entry:
    """One file slated for archival."""

    source_path: str
    archive_path: str

    def with_prefix(self, prefix: str) -> "Entry":
        """Return a copy whose archive path is nested under ``prefix``."""
        return Entry(self.source_path, f"{prefix}/{self.archive_path}")


@dataclass(frozen=True)
class ShortcutTarget:
    """A resolved shortcut: the sanitized display name and its target directory."""

    display_name: str
    target_dir: str
    link_path: str = ""


@dataclass(frozen=True)
class ArchiveJob:
    """An output archive path plus the ordered entries to write into it."""

    output_path: str
    entries: Tuple[Entry, ...] = ()

    def __post_init__(self):
        # Entries may arrive as any iterable; stored as a tuple
        object.__setattr__(self, "entries", tuple(self.entries))


@dataclass
class BackupResult:
    """Outcome of a single run in either mode."""

    archives: List[str] = field(default_factory=list)
    entries_written: int = 0
    skipped_links: List[str] = field(default_factory=list)
    failed_jobs: List[str] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        # Partial failures are tolerated; only a run where every job failed is not
        return not (self.failed_jobs and not self.archives)

