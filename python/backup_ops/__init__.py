from .errors import (
    BackupError,
    ShortcutResolutionError,
    ArchiveOpenError,
    ArchiveWriteError,
    OutputDirectoryError,
    NoShortcutsFoundError,
    NothingToArchiveError,
)
from .models import Entry, ShortcutTarget, ArchiveJob, BackupResult

# Pipeline components
from .path_filter import PathFilter, FileAttributes, attributes_from_stat, read_attributes
from .path_utils import ArchivePathGenerator, TempFileManager, to_archive_name
from .tree_collector import TreeCollector, CollectionStats
from .shortcut_resolver import (
    ShortcutResolver,
    ShortcutService,
    SymlinkShortcutService,
    WindowsShellLinkService,
    default_shortcut_service,
    derive_display_name,
)
from .archive_creators import (
    ArchiveHandle,
    ZipArchiveCreator,
    ZstdArchiveCreator,
    ArchiveCreatorFactory,
)
from .archive_verifier import ZipArchiveVerifier, ZstdArchiveVerifier, ArchiveVerifier
from .progress import ConsoleProgressReporter, LoggingProgressReporter, progress_percentage
from .archive_writer import ArchiveWriter

# Run modes
from .orchestrator import BackupOrchestrator

__all__ = [
    # Errors
    "BackupError",
    "ShortcutResolutionError",
    "ArchiveOpenError",
    "ArchiveWriteError",
    "OutputDirectoryError",
    "NoShortcutsFoundError",
    "NothingToArchiveError",
    # Data model
    "Entry",
    "ShortcutTarget",
    "ArchiveJob",
    "BackupResult",
    # Filtering and traversal
    "PathFilter",
    "FileAttributes",
    "attributes_from_stat",
    "read_attributes",
    "TreeCollector",
    "CollectionStats",
    # Shortcuts
    "ShortcutResolver",
    "ShortcutService",
    "SymlinkShortcutService",
    "WindowsShellLinkService",
    "default_shortcut_service",
    "derive_display_name",
    # Archive writing
    "ArchiveHandle",
    "ZipArchiveCreator",
    "ZstdArchiveCreator",
    "ArchiveCreatorFactory",
    "ArchiveWriter",
    "ConsoleProgressReporter",
    "LoggingProgressReporter",
    "progress_percentage",
    # Verification
    "ZipArchiveVerifier",
    "ZstdArchiveVerifier",
    "ArchiveVerifier",
    # Paths
    "ArchivePathGenerator",
    "TempFileManager",
    "to_archive_name",
    # Orchestration
    "BackupOrchestrator",
]
