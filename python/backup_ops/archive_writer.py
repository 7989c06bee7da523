"""
Streams collected entries into one output archive.
"""

import os
import time
from typing import Optional, Sequence

from colored_logger import get_colored_logger
from .archive_creators import ArchiveCreatorFactory
from .archive_verifier import ArchiveVerifier
from .models import ArchiveJob, Entry
from .path_filter import PathFilter, read_attributes
from .path_utils import to_archive_name
from .progress import ConsoleProgressReporter

logger = get_colored_logger(__name__)


class ArchiveWriter:
    """
    Owns the writing of one archive per call.

    Every entry is checked against the path filter again using its attributes
    at write time; entries that are now excluded, directories, and files that
    vanished since collection are left out.
    """

    def __init__(
        self,
        creator=None,
        path_filter: Optional[PathFilter] = None,
        progress=None,
        verify: bool = False,
        verifier: Optional[ArchiveVerifier] = None,
    ):
        self.creator = creator or ArchiveCreatorFactory.create_archive_creator("zip")
        self.path_filter = path_filter or PathFilter()
        self.progress = progress or ConsoleProgressReporter()
        self.verify = verify
        self.verifier = verifier or ArchiveVerifier()

    def _should_write(self, entry: Entry) -> bool:
        attributes = read_attributes(entry.source_path)
        if attributes is None:
            logger.warning("Skipping %s: no longer accessible", entry.source_path)
            return False
        if not self.path_filter.include(os.path.basename(entry.source_path), attributes):
            logger.warning("Skipping %s: excluded at write time", entry.source_path)
            return False
        return not attributes.is_directory

    def write_archive(self, output_path: str, entries: Sequence[Entry]) -> int:
        """
        Write ``entries`` into a new archive at ``output_path``.

        Args:
            output_path: Destination archive; an existing file is replaced
            entries: Entries in the order they should be added

        Returns:
            Number of files written into the archive

        Raises:
            ArchiveOpenError: If the archive cannot be created
            ArchiveWriteError: If the archive cannot be finalized
        """
        total = len(entries)
        written = 0
        start_time = time.time()

        with self.creator.open(output_path) as handle:
            for index, entry in enumerate(entries):
                if not self._should_write(entry):
                    continue

                archive_name = to_archive_name(entry.archive_path)
                self.progress.update(index, total, archive_name)
                if handle.add_entry(entry.source_path, archive_name):
                    written += 1

        self.progress.finish(total, output_path)
        logger.info(
            "Archive %s written: %d of %d entries in %.2f seconds",
            output_path,
            written,
            total,
            time.time() - start_time,
        )

        if self.verify:
            info = self.verifier.get_archive_info(output_path)
            if info["valid"]:
                logger.info(
                    "Verified %s: %d files, %.2f MB uncompressed, %.2f MB on disk",
                    output_path,
                    info["file_count"],
                    info["uncompressed_size"] / (1024 * 1024),
                    info["size_bytes"] / (1024 * 1024),
                )
            else:
                logger.warning("Archive integrity check failed: %s", output_path)

        return written

    def write_job(self, job: ArchiveJob) -> int:
        return self.write_archive(job.output_path, job.entries)
