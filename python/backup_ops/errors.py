"""
Exceptions raised by the backup pipeline.

Resolution and listing problems are recovered locally by the orchestrator and
collector; the remaining errors end a single archive job or the whole run.
"""


class BackupError(Exception):
    """Base class for every backup failure reported to the operator."""


class ShortcutResolutionError(BackupError):
    """A shortcut could not be resolved to an existing target directory."""

    def __init__(self, link_path, reason: str):
        self.link_path = str(link_path)
        self.reason = reason
        super().__init__(f"Cannot resolve shortcut {self.link_path}: {reason}")


class ArchiveOpenError(BackupError):
    """The archive backend could not create the output archive."""

    def __init__(self, archive_path, reason):
        self.archive_path = str(archive_path)
        self.reason = reason
        super().__init__(f"Cannot open {self.archive_path}: {reason}")


class OutputDirectoryError(BackupError):
    """The split-mode output directory could not be created or accessed."""


class NoShortcutsFoundError(BackupError):
    """The source folder holds no shortcut files."""


class NothingToArchiveError(BackupError):
    """No eligible files were collected from any shortcut target."""


class ArchiveWriteError(BackupError):
    """The archive could not be finalized after its entries were added."""

    def __init__(self, archive_path, reason):
        self.archive_path = str(archive_path)
        self.reason = reason
        super().__init__(f"Cannot finalize {self.archive_path}: {reason}")
