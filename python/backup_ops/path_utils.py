"""
Path utilities for archive operations.

This module computes in-archive names, output archive paths and temporary
file locations used while an archive is being written.
"""

import os
import re
import threading
from colored_logger import get_colored_logger

logger = get_colored_logger(__name__)

FORMAT_EXTENSIONS = {"zip": "zip", "zstd": "zst"}
_DRIVE_PREFIX = re.compile(r"^[A-Za-z]:/")


def relative_archive_path(base_dir: str, child_path: str, child_name: str) -> str:
    """
    Path of ``child_path`` relative to ``base_dir``, falling back to the bare
    filename when the child does not live under the base directory.
    """
    base = base_dir.rstrip("/\\")
    if not base:
        # Filesystem root: everything below is relative to the separator
        base = base_dir[:1]
        prefix_len = len(base)
    else:
        prefix_len = len(base) + 1

    if (
        child_path.startswith(base)
        and len(child_path) > prefix_len
        and child_path[prefix_len - 1] in ("/", "\\", os.sep)
    ):
        return to_archive_name(child_path[prefix_len:])
    return to_archive_name(child_name)


def to_archive_name(path: str) -> str:
    """Normalize a relative path for use as a name inside an archive."""
    name = path.replace("\\", "/")
    if _DRIVE_PREFIX.match(name):
        name = name[2:]
    if os.sep != "/":
        name = name.replace(os.sep, "/")
    return name.lstrip("/")


class ArchivePathGenerator:
    """Builds output archive paths."""

    def determine_extension(self, compression_format: str) -> str:
        """Determine file extension based on compression format."""
        try:
            return FORMAT_EXTENSIONS[compression_format]
        except KeyError:
            raise ValueError(f"Unknown compression format: {compression_format}")

    def split_archive_path(
        self, output_dir: str, display_name: str, compression_format: str = "zip"
    ) -> str:
        """Path of the per-shortcut archive written in split mode."""
        extension = self.determine_extension(compression_format)
        return os.path.join(output_dir, f"{display_name}.{extension}")


class TempFileManager:
    """Manages the temporary file an archive is written to before it is published."""

    @staticmethod
    def generate_temp_path(base_path: str, suffix: str = "tmp") -> str:
        """Generate temporary file path next to ``base_path``, unique per thread."""
        return f"{base_path}.{suffix}.{os.getpid()}.{threading.get_ident()}"

    @staticmethod
    def cleanup_temp_file(temp_path: str) -> None:
        """Remove a leftover temporary file."""
        if os.path.exists(temp_path):
            try:
                os.remove(temp_path)
            except OSError as e:
                logger.debug("Failed to cleanup temp file %s: %s", temp_path, e)

    @staticmethod
    def atomic_move(src_path: str, dest_path: str) -> None:
        """Publish ``src_path`` as ``dest_path``, replacing any existing file."""
        try:
            os.replace(src_path, dest_path)
        except OSError as e:
            logger.error("Failed to move %s to %s: %s", src_path, dest_path, e)
            raise
