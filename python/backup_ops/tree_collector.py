"""
Directory traversal for archive operations.

This module walks a shortcut's target directory depth-first and turns every
eligible regular file into an Entry whose archive path is relative to the
directory the walk started from.
"""

import os
from typing import Iterator, List, Optional

from colored_logger import get_colored_logger
from .models import Entry
from .path_filter import PathFilter, attributes_from_stat
from .path_utils import relative_archive_path

logger = get_colored_logger(__name__)


class CollectionStats:
    """Container for traversal statistics."""

    def __init__(self):
        self.total_files = 0
        self.total_size = 0
        self.skipped_items = 0
        self.unreadable_dirs = 0

    def add_file(self, file_size: int) -> None:
        self.total_files += 1
        self.total_size += file_size

    def skip_item(self) -> None:
        self.skipped_items += 1

    def unreadable_dir(self) -> None:
        self.unreadable_dirs += 1


class TreeCollector:
    """Recursively collects (source path, archive path) entries under a directory."""

    def __init__(self, path_filter: Optional[PathFilter] = None):
        self.path_filter = path_filter or PathFilter()
        self.stats = CollectionStats()

    def _list_children(self, current_dir: str) -> List[os.DirEntry]:
        """List the immediate children of ``current_dir``; empty when unreadable."""
        try:
            with os.scandir(current_dir) as it:
                return list(it)
        except OSError as e:
            logger.warning("Cannot list directory %s: %s", current_dir, e)
            self.stats.unreadable_dir()
            return []

    def iter_entries(self, base_dir: str, current_dir: str) -> Iterator[Entry]:
        """Yield entries for every eligible file below ``current_dir``."""
        for child in self._list_children(current_dir):
            try:
                st = child.stat()
            except OSError as e:
                # Dangling link or entry removed since the listing
                logger.warning("Skipping %s: %s", child.path, e)
                self.stats.skip_item()
                continue

            attributes = attributes_from_stat(child.name, st)
            if not self.path_filter.include(child.name, attributes):
                logger.trace("Excluded %s", child.path)
                self.stats.skip_item()
                continue

            if attributes.is_directory:
                yield from self.iter_entries(base_dir, child.path)
            elif child.is_file():
                archive_path = relative_archive_path(base_dir, child.path, child.name)
                self.stats.add_file(st.st_size)
                yield Entry(child.path, archive_path)
            else:
                # Sockets, FIFOs and device nodes have no archivable content
                self.stats.skip_item()

    def collect(self, base_dir: str, current_dir: Optional[str] = None) -> List[Entry]:
        """Collect every eligible file below ``current_dir`` (default ``base_dir``)."""
        self.stats = CollectionStats()
        entries = list(self.iter_entries(base_dir, current_dir or base_dir))

        logger.debug(
            "Collected %d files (%.2f MB) from %s, %d skipped, %d unreadable directories",
            self.stats.total_files,
            self.stats.total_size / (1024 * 1024),
            base_dir,
            self.stats.skipped_items,
            self.stats.unreadable_dirs,
        )
        return entries
