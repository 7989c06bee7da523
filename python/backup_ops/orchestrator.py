"""
Backup Orchestrator - runs the single-archive and split modes.

The orchestrator wires the shortcut resolver, the tree collector and the
archive writer together:
- Single-archive mode merges every shortcut target into one archive, each
  target nested under its shortcut's display name
- Split mode writes one archive per shortcut into an output directory, with
  paths relative to that shortcut's target
"""

from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import List, Optional, Tuple

from colored_logger import get_colored_logger
from .archive_creators import ArchiveCreatorFactory
from .archive_writer import ArchiveWriter
from .errors import (
    ArchiveOpenError,
    ArchiveWriteError,
    NoShortcutsFoundError,
    NothingToArchiveError,
    OutputDirectoryError,
    ShortcutResolutionError,
)
from .models import ArchiveJob, BackupResult, Entry, ShortcutTarget
from .path_filter import PathFilter
from .path_utils import ArchivePathGenerator
from .progress import ConsoleProgressReporter, LoggingProgressReporter
from .shortcut_resolver import ShortcutResolver
from .tree_collector import TreeCollector

logger = get_colored_logger(__name__)


class BackupOrchestrator:
    """Runs one backup pass over the shortcuts in a source folder."""

    def __init__(
        self,
        resolver: Optional[ShortcutResolver] = None,
        path_filter: Optional[PathFilter] = None,
        compression_format: str = "zip",
        compression_level: Optional[int] = None,
        workers: int = 1,
        verify: bool = False,
        progress=None,
    ):
        """
        Initialize the orchestrator.

        Args:
            resolver: Shortcut resolver (platform default if None)
            path_filter: Inclusion policy shared by collection and writing
            compression_format: 'zip' or 'zstd'
            compression_level: Compression level (None for the format default)
            workers: Split-mode jobs processed side by side (1 keeps them sequential)
            verify: Read every archive back after writing it
            progress: Progress reporter for sequential jobs
        """
        self.resolver = resolver or ShortcutResolver()
        self.path_filter = path_filter or PathFilter()
        self.compression_format = compression_format
        self.creator = ArchiveCreatorFactory.create_archive_creator(
            compression_format, compression_level
        )
        self.workers = max(1, workers)
        self.verify = verify
        self.progress = progress or ConsoleProgressReporter()
        self.path_generator = ArchivePathGenerator()

    def _make_writer(self, progress=None) -> ArchiveWriter:
        return ArchiveWriter(
            creator=self.creator,
            path_filter=self.path_filter,
            progress=progress or self.progress,
            verify=self.verify,
        )

    def _resolve(self, link_path: str, result: BackupResult) -> Optional[ShortcutTarget]:
        """Resolve one shortcut; failures are logged and the link is skipped."""
        try:
            return self.resolver.resolve(link_path)
        except ShortcutResolutionError as e:
            logger.warning("Skipping shortcut: %s", e)
            result.skipped_links.append(link_path)
            return None

    def collect_target(self, target: ShortcutTarget) -> List[Entry]:
        """Collect the entries of one shortcut target, relative to that target."""
        collector = TreeCollector(self.path_filter)
        entries = collector.collect(target.target_dir)
        logger.info(
            "Collected %d files from %s (%s)",
            len(entries),
            target.display_name,
            target.target_dir,
        )
        return entries

    def build_single_job(
        self, source_folder: str, output_path: str, result: Optional[BackupResult] = None
    ) -> ArchiveJob:
        """Merge every shortcut target into one job, nested under display names."""
        result = result if result is not None else BackupResult()
        entries: List[Entry] = []

        for link_path in self.resolver.find_shortcuts(source_folder):
            target = self._resolve(link_path, result)
            if target is None:
                continue
            entries.extend(
                entry.with_prefix(target.display_name)
                for entry in self.collect_target(target)
            )

        return ArchiveJob(output_path, entries)

    def run_single(self, source_folder: str, output_path: str) -> BackupResult:
        """
        Write every shortcut target under ``source_folder`` into one archive.

        Raises:
            NothingToArchiveError: If no eligible file was found
            ArchiveOpenError: If the output archive cannot be created
            ArchiveWriteError: If the output archive cannot be finalized
        """
        result = BackupResult()
        job = self.build_single_job(source_folder, output_path, result)

        if not job.entries:
            raise NothingToArchiveError("No files to archive.")

        logger.info("Archiving %d files into %s", len(job.entries), output_path)
        result.entries_written = self._make_writer().write_job(job)
        result.archives.append(output_path)
        return result

    def ensure_output_dir(self, output_dir: str) -> None:
        """Create the split-mode output directory; an existing one is fine."""
        try:
            Path(output_dir).mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise OutputDirectoryError(
                f"Cannot create or access output dir {output_dir}: {e}"
            ) from e

    def _split_job(
        self, link_path: str, output_dir: str, progress=None
    ) -> Tuple[BackupResult, Optional[str]]:
        """Resolve, collect and write the archive for one shortcut."""
        result = BackupResult()
        target = self._resolve(link_path, result)
        if target is None:
            return result, None

        output_path = self.path_generator.split_archive_path(
            output_dir, target.display_name, self.compression_format
        )
        job = ArchiveJob(output_path, self.collect_target(target))

        try:
            result.entries_written = self._make_writer(progress).write_job(job)
            result.archives.append(output_path)
        except (ArchiveOpenError, ArchiveWriteError) as e:
            logger.failure("%s", e)
            result.failed_jobs.append(output_path)
        return result, target.display_name

    def run_split(self, source_folder: str, output_dir: str) -> BackupResult:
        """
        Write one archive per shortcut in ``source_folder`` into ``output_dir``.

        Raises:
            OutputDirectoryError: If the output directory cannot be created
            NoShortcutsFoundError: If the source folder holds no shortcuts
        """
        self.ensure_output_dir(output_dir)

        links = self.resolver.find_shortcuts(source_folder)
        if not links:
            raise NoShortcutsFoundError(f"No shortcut files found in {source_folder}")

        if self.workers > 1 and len(links) > 1:
            with ThreadPoolExecutor(max_workers=self.workers) as executor:
                outcomes = list(
                    executor.map(
                        lambda link: self._split_job(
                            link,
                            output_dir,
                            LoggingProgressReporter(self.resolver.display_name(link)),
                        ),
                        links,
                    )
                )
        else:
            outcomes = [self._split_job(link, output_dir) for link in links]

        result = BackupResult()
        seen_names = set()
        for job_result, display_name in outcomes:
            if display_name is not None:
                if display_name in seen_names:
                    logger.warning(
                        "Several shortcuts share the name %s; the last archive written wins",
                        display_name,
                    )
                seen_names.add(display_name)
            result.archives.extend(job_result.archives)
            result.entries_written += job_result.entries_written
            result.skipped_links.extend(job_result.skipped_links)
            result.failed_jobs.extend(job_result.failed_jobs)

        return result
