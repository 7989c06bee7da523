#!/usr/bin/env python3
"""
Shortcut Backup CLI Tool

Snapshots every folder reachable through the shortcuts in a source folder
into compressed archives: one merged archive by default, or one archive per
shortcut with --split.

Usage:
    python3 cli_backup.py /path/to/shortcuts /backups/all.zip
    python3 cli_backup.py --split /path/to/shortcuts /backups/by-shortcut
    python3 cli_backup.py --split --format zstd --workers 4 /path/to/shortcuts /backups
"""

import argparse
import logging
import sys
from typing import Optional

from colored_logger import get_colored_logger, parse_level, setup_colored_logging
from backup_ops import (
    ArchiveCreatorFactory,
    BackupError,
    BackupOrchestrator,
    ConsoleProgressReporter,
    PathFilter,
    ShortcutResolver,
)
from settings import Settings

logger = get_colored_logger(__name__)


class BackupCLI:
    """Command-line interface for shortcut backups."""

    def __init__(self):
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """Create the argument parser."""
        parser = argparse.ArgumentParser(
            prog="backup",
            description="Back up the folders behind a directory of shortcuts into archives",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog="""
Examples:
  # One archive, each shortcut's files under the shortcut's name
  backup /path/to/shortcuts /backups/all.zip

  # One archive per shortcut in an output directory
  backup --split /path/to/shortcuts /backups/by-shortcut

  # Zstandard archives, four shortcuts at a time
  backup --split --format zstd --workers 4 /path/to/shortcuts /backups
            """,
        )
        parser.add_argument(
            "--split",
            action="store_true",
            help="Write one archive per shortcut into the output directory",
        )
        parser.add_argument("source_folder", help="Folder containing the shortcuts")
        parser.add_argument(
            "output",
            help="Output archive file, or output directory with --split",
        )
        parser.add_argument(
            "--format",
            "-f",
            choices=["zip", "zstd"],
            help="Compression format (default: zip, or the settings file value)",
        )
        parser.add_argument(
            "--level",
            "-l",
            type=int,
            help="Compression level (zip: 0-9, zstd: 1-22)",
        )
        parser.add_argument(
            "--workers",
            "-w",
            type=int,
            help="Number of shortcuts archived in parallel in split mode",
        )
        parser.add_argument("--settings", help="Path to a JSON settings file")
        parser.add_argument(
            "--verify", action="store_true", help="Verify every archive after writing"
        )
        parser.add_argument(
            "--quiet", "-q", action="store_true", help="Suppress the progress line"
        )
        parser.add_argument(
            "--verbose", "-v", action="store_true", help="Enable debug logging"
        )
        return parser

    def run(self, args: Optional[list] = None) -> int:
        """Run the CLI with the given arguments."""
        try:
            parsed_args = self.parser.parse_args(args)
        except SystemExit as e:
            # --help exits cleanly, any usage error is reported as 1
            return 0 if e.code in (0, None) else 1

        try:
            return self._handle_backup(parsed_args)
        except KeyboardInterrupt:
            logger.info("Operation cancelled by user")
            return 130
        except BackupError as e:
            logger.failure("%s", e)
            return 1
        except Exception as e:
            logger.error("Error: %s", e)
            logger.debug("Full error details:", exc_info=True)
            return 1

    def _build_orchestrator(self, args, settings: Settings) -> BackupOrchestrator:
        compression_format = args.format or settings.compression_format
        if args.level is not None:
            compression_level = args.level
        elif compression_format == settings.compression_format:
            compression_level = settings.compression_level
        else:
            compression_level = None

        if compression_format not in ArchiveCreatorFactory.get_supported_formats():
            raise BackupError(
                f"{compression_format} is not available. Install with: pip install zstandard"
            )

        try:
            return BackupOrchestrator(
                resolver=ShortcutResolver(suffixes=settings.shortcut_suffixes),
                path_filter=PathFilter(settings.excluded_names),
                compression_format=compression_format,
                compression_level=compression_level,
                workers=args.workers if args.workers is not None else settings.workers,
                verify=args.verify or settings.verify_archives,
                progress=ConsoleProgressReporter(show_entries=not args.quiet),
            )
        except ValueError as e:
            raise BackupError(str(e)) from e

    def _handle_backup(self, args) -> int:
        """Run the selected mode."""
        settings = Settings(args.settings)
        if args.verbose:
            logging.getLogger().setLevel(logging.DEBUG)
        else:
            logging.getLogger().setLevel(parse_level(settings.log_level))

        orchestrator = self._build_orchestrator(args, settings)

        if args.split:
            result = orchestrator.run_split(args.source_folder, args.output)
        else:
            result = orchestrator.run_single(args.source_folder, args.output)

        if result.skipped_links:
            logger.notice("%d shortcut(s) could not be resolved", len(result.skipped_links))
        if result.failed_jobs:
            logger.error("%d archive(s) could not be written", len(result.failed_jobs))

        if not result.succeeded:
            return 1

        logger.success(
            "Backup complete: %d archive(s), %d files",
            len(result.archives),
            result.entries_written,
        )
        return 0


def main():
    """Main entry point for the CLI."""
    setup_colored_logging(level=logging.INFO)

    # Progress lines carry arbitrary Unicode file names
    if hasattr(sys.stdout, "reconfigure"):
        sys.stdout.reconfigure(errors="backslashreplace")

    cli = BackupCLI()
    return cli.run()


if __name__ == "__main__":
    sys.exit(main())
