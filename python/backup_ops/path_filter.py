"""
Inclusion policy for filesystem entries.

The same filter runs while walking a tree and again right before bytes are
written, so an entry that became hidden (or slipped in through another
collection path) still stays out of the archive.
"""

import os
import stat
from dataclasses import dataclass
from typing import Iterable, Optional

from colored_logger import get_colored_logger

logger = get_colored_logger(__name__)

DEFAULT_EXCLUDED_NAMES = ("desktop.ini",)

# Windows attribute bits, present on os.stat results as st_file_attributes
FILE_ATTRIBUTE_HIDDEN = getattr(stat, "FILE_ATTRIBUTE_HIDDEN", 0x2)
FILE_ATTRIBUTE_SYSTEM = getattr(stat, "FILE_ATTRIBUTE_SYSTEM", 0x4)
# BSD/macOS user flag for Finder-hidden files
UF_HIDDEN = getattr(stat, "UF_HIDDEN", 0x8000)


@dataclass(frozen=True)
class FileAttributes:
    """The attribute subset the filter cares about."""

    hidden: bool = False
    system: bool = False
    is_directory: bool = False


def attributes_from_stat(name: str, st: os.stat_result) -> FileAttributes:
    """Build FileAttributes from a stat result for an entry called ``name``."""
    is_directory = stat.S_ISDIR(st.st_mode)

    win_attrs = getattr(st, "st_file_attributes", None)
    if win_attrs is not None:
        return FileAttributes(
            hidden=bool(win_attrs & FILE_ATTRIBUTE_HIDDEN),
            system=bool(win_attrs & FILE_ATTRIBUTE_SYSTEM),
            is_directory=is_directory,
        )

    # POSIX: dot-files are the hidden convention, plus the BSD hidden flag
    hidden = name.startswith(".") and name not in (".", "..")
    if getattr(st, "st_flags", 0) & UF_HIDDEN:
        hidden = True
    return FileAttributes(hidden=hidden, system=False, is_directory=is_directory)


def read_attributes(path: str) -> Optional[FileAttributes]:
    """Query current on-disk attributes; ``None`` when the path cannot be stat'ed."""
    try:
        st = os.stat(path)
    except OSError as e:
        logger.debug("Cannot read attributes of %s: %s", path, e)
        return None
    return attributes_from_stat(os.path.basename(path), st)


class PathFilter:
    """Decides whether a filesystem entry is eligible for the archive."""

    def __init__(self, excluded_names: Optional[Iterable[str]] = None):
        # desktop.ini is always excluded; configured names are added to it
        names = set(DEFAULT_EXCLUDED_NAMES).union(excluded_names or ())
        self.excluded_names = frozenset(n.casefold() for n in names)

    def include(self, name: str, attributes: FileAttributes) -> bool:
        """Return True when ``name`` with ``attributes`` should be archived."""
        if name in (".", ".."):
            return False
        if attributes.hidden or attributes.system:
            return False
        if name.casefold() in self.excluded_names:
            return False
        return True

    def include_path(self, path: str) -> bool:
        """Apply the filter to a path using its attributes as they are right now."""
        attributes = read_attributes(path)
        if attributes is None:
            return False
        return self.include(os.path.basename(path), attributes)
