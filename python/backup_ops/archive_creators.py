"""
Archive backends for different compression formats.

Each creator opens an archive handle that accepts entries one at a time. The
handle writes into a temporary file next to the destination and only replaces
the destination on close, so a job that fails midway never leaves a partial
archive behind.
"""

import os
import tarfile
import zipfile
from typing import List, Optional
from colored_logger import get_colored_logger

from .errors import ArchiveOpenError, ArchiveWriteError
from .path_utils import TempFileManager

logger = get_colored_logger(__name__)

try:
    import zstandard as zstd

    ZSTD_AVAILABLE = True
except ImportError:
    ZSTD_AVAILABLE = False


class ArchiveHandle:
    """An open output archive. Use as a context manager or call close()/abort()."""

    def __init__(self, archive_path: str):
        self.archive_path = archive_path
        self.temp_path = TempFileManager.generate_temp_path(archive_path)
        self.closed = False

        if os.path.isdir(archive_path):
            raise ArchiveOpenError(archive_path, "path is a directory")

        try:
            self._open()
        except (OSError, zipfile.BadZipFile, tarfile.TarError) as e:
            TempFileManager.cleanup_temp_file(self.temp_path)
            raise ArchiveOpenError(archive_path, e) from e

    def _open(self) -> None:
        raise NotImplementedError

    def _finalize(self) -> None:
        raise NotImplementedError

    def _discard(self) -> None:
        raise NotImplementedError

    def add_entry(self, source_path: str, archive_name: str) -> bool:
        """Add one file under ``archive_name``; False when the file could not be read."""
        raise NotImplementedError

    def close(self) -> str:
        """Finalize the archive and publish it at its destination path."""
        if self.closed:
            return self.archive_path
        self.closed = True
        try:
            self._finalize()
            TempFileManager.atomic_move(self.temp_path, self.archive_path)
        except (OSError, zipfile.BadZipFile, tarfile.TarError) as e:
            TempFileManager.cleanup_temp_file(self.temp_path)
            raise ArchiveWriteError(self.archive_path, e) from e
        return self.archive_path

    def abort(self) -> None:
        """Drop the archive; nothing is published."""
        if self.closed:
            return
        self.closed = True
        try:
            self._discard()
        except (OSError, zipfile.BadZipFile, tarfile.TarError) as e:
            logger.debug("Error discarding %s: %s", self.temp_path, e)
        TempFileManager.cleanup_temp_file(self.temp_path)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        if exc_type is None:
            self.close()
        else:
            self.abort()
        return False


class ZipArchiveHandle(ArchiveHandle):
    """ZIP output: DEFLATE, ZIP64, UTF-8 names, file timestamps kept."""

    def __init__(self, archive_path: str, compression_level: int = 6):
        self.compression_level = compression_level
        self._zipf: Optional[zipfile.ZipFile] = None
        super().__init__(archive_path)

    def _open(self) -> None:
        self._zipf = zipfile.ZipFile(
            self.temp_path,
            "w",
            zipfile.ZIP_DEFLATED,
            compresslevel=self.compression_level,
            allowZip64=True,
            strict_timestamps=False,
        )

    @staticmethod
    def zip_entry_name(archive_name: str) -> str:
        """
        Make ``archive_name`` encodable as a UTF-8 ZIP name.

        Names carrying undecodable filesystem bytes (surrogate escapes) keep
        those bytes as ``\\xNN`` text so the file is still archived.
        """
        try:
            archive_name.encode("utf-8")
            return archive_name
        except UnicodeEncodeError:
            return os.fsencode(archive_name).decode("utf-8", "backslashreplace")

    def add_entry(self, source_path: str, archive_name: str) -> bool:
        name = self.zip_entry_name(archive_name)
        if name != archive_name:
            logger.warning("Name of %s is not valid UTF-8; stored as %s", source_path, name)
        try:
            # zipfile flags non-ASCII names as UTF-8 on its own
            self._zipf.write(source_path, name)
            return True
        except (OSError, ValueError, zipfile.BadZipFile) as e:
            logger.warning("Failed to add file %s to archive: %s", source_path, e)
            return False

    def _finalize(self) -> None:
        self._zipf.close()

    def _discard(self) -> None:
        self._zipf.close()


class ZstdArchiveHandle(ArchiveHandle):
    """Zstandard-compressed streaming tar output."""

    def __init__(self, archive_path: str, compression_level: int = 3):
        self.compression_level = compression_level
        self._file = None
        self._compressor = None
        self._tar: Optional[tarfile.TarFile] = None
        super().__init__(archive_path)

    def _open(self) -> None:
        cctx = zstd.ZstdCompressor(
            level=self.compression_level,
            write_content_size=True,
            write_checksum=True,
        )
        self._file = open(self.temp_path, "wb")
        try:
            self._compressor = cctx.stream_writer(self._file, closefd=False)
            self._tar = tarfile.open(
                fileobj=self._compressor,
                mode="w|",
                format=tarfile.PAX_FORMAT,
                encoding="utf-8",
            )
        except Exception:
            self._file.close()
            raise

    def add_entry(self, source_path: str, archive_name: str) -> bool:
        try:
            self._tar.add(source_path, arcname=archive_name, recursive=False)
            return True
        except (OSError, tarfile.TarError) as e:
            logger.warning("Failed to add file %s to archive: %s", source_path, e)
            return False

    def _finalize(self) -> None:
        try:
            self._tar.close()
            self._compressor.close()
        finally:
            self._file.close()

    def _discard(self) -> None:
        self._file.close()


class ZipArchiveCreator:
    """Creates ZIP format archives."""

    def __init__(self, compression_level: int = 6):
        self.compression_level = compression_level

    def open(self, archive_path: str) -> ArchiveHandle:
        return ZipArchiveHandle(archive_path, self.compression_level)


class ZstdArchiveCreator:
    """Creates ZSTD format archives with streaming compression."""

    def __init__(self, compression_level: int = 3):
        self.compression_level = compression_level

        if not ZSTD_AVAILABLE:
            raise ImportError(
                "ZSTD library not available. Install with: pip install zstandard"
            )

    def open(self, archive_path: str) -> ArchiveHandle:
        return ZstdArchiveHandle(archive_path, self.compression_level)


class ArchiveCreatorFactory:
    """Factory for creating appropriate archive creators."""

    DEFAULT_COMPRESSION_LEVEL = {"zip": 6, "zstd": 3}
    COMPRESSION_LEVEL_RANGE = {"zip": (0, 9), "zstd": (1, 22)}

    @staticmethod
    def create_archive_creator(
        compression_format: str = "zip", compression_level: Optional[int] = None
    ):
        """
        Create appropriate archive creator based on format.

        Raises:
            ValueError: If the format is unknown or the level is out of range
        """
        if compression_format not in ArchiveCreatorFactory.DEFAULT_COMPRESSION_LEVEL:
            raise ValueError(f"Unsupported compression format: {compression_format}")

        level = (
            compression_level
            if compression_level is not None
            else ArchiveCreatorFactory.DEFAULT_COMPRESSION_LEVEL[compression_format]
        )
        low, high = ArchiveCreatorFactory.COMPRESSION_LEVEL_RANGE[compression_format]
        if isinstance(level, bool) or not isinstance(level, int) or not low <= level <= high:
            raise ValueError(
                f"Invalid {compression_format} compression level {level!r} "
                f"(expected {low}-{high})"
            )
        if compression_format == "zip":
            return ZipArchiveCreator(level)
        return ZstdArchiveCreator(level)

    @staticmethod
    def get_supported_formats() -> List[str]:
        """Get list of supported compression formats."""
        formats = ["zip"]  # ZIP is always available
        if ZSTD_AVAILABLE:
            formats.append("zstd")
        return formats
