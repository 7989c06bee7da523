"""
Archive integrity verification.

Reads back a finished archive to confirm it is complete and lists the entry
names it holds.
"""

import os
import tarfile
import zipfile
from datetime import datetime
from typing import Any, Dict, List
from colored_logger import get_colored_logger

logger = get_colored_logger(__name__)

try:
    import zstandard as zstd

    ZSTD_AVAILABLE = True
except ImportError:
    ZSTD_AVAILABLE = False


class ZipArchiveVerifier:
    """Verifies ZIP archive integrity."""

    def verify_integrity(self, archive_path: str) -> bool:
        try:
            with zipfile.ZipFile(archive_path, "r") as zipf:
                # testzip reads every member and checks its CRC
                bad_file = zipf.testzip()
                if bad_file is not None:
                    logger.debug("ZIP integrity check failed on file: %s", bad_file)
                    return False
                return True
        except (OSError, zipfile.BadZipFile, EOFError) as e:
            logger.debug("ZIP integrity verification failed: %s", e)
            return False

    def list_entries(self, archive_path: str) -> List[str]:
        with zipfile.ZipFile(archive_path, "r") as zipf:
            return [info.filename for info in zipf.infolist() if not info.is_dir()]

    def get_archive_info(self, archive_path: str) -> Dict[str, Any]:
        with zipfile.ZipFile(archive_path, "r") as zipf:
            file_list = zipf.infolist()
            return {
                "file_count": len(file_list),
                "compressed_size": sum(f.compress_size for f in file_list),
                "uncompressed_size": sum(f.file_size for f in file_list),
            }


class ZstdArchiveVerifier:
    """Verifies ZSTD (tar) archive integrity."""

    def _members(self, archive_path: str):
        if not ZSTD_AVAILABLE:
            raise ImportError(
                "ZSTD library not available. Install with: pip install zstandard"
            )
        with open(archive_path, "rb") as f:
            dctx = zstd.ZstdDecompressor()
            with dctx.stream_reader(f) as decompressor:
                with tarfile.open(fileobj=decompressor, mode="r|") as tar:
                    for member in tar:
                        if member.isfile():
                            data = tar.extractfile(member)
                            # Draining each member exercises the checksum
                            while data is not None and data.read(1024 * 1024):
                                pass
                        yield member

    def verify_integrity(self, archive_path: str) -> bool:
        try:
            for _ in self._members(archive_path):
                pass
            return True
        except ImportError as e:
            logger.debug("%s", e)
            return False
        except zstd.ZstdError as e:
            logger.debug("ZSTD decompression error: %s", e)
            return False
        except (OSError, tarfile.TarError) as e:
            logger.debug("ZSTD integrity verification failed: %s", e)
            return False

    def list_entries(self, archive_path: str) -> List[str]:
        return [m.name for m in self._members(archive_path) if m.isfile()]

    def get_archive_info(self, archive_path: str) -> Dict[str, Any]:
        members = [m for m in self._members(archive_path) if m.isfile()]
        return {
            "file_count": len(members),
            "compressed_size": os.path.getsize(archive_path),
            "uncompressed_size": sum(m.size for m in members),
        }


class ArchiveVerifier:
    """Picks the format-specific verifier from the archive's extension."""

    def __init__(self):
        self.zip_verifier = ZipArchiveVerifier()
        self.zstd_verifier = ZstdArchiveVerifier()

    def _verifier_for(self, archive_path: str):
        if archive_path.endswith(".zst"):
            return self.zstd_verifier
        return self.zip_verifier

    def verify_archive_integrity(self, archive_path: str) -> bool:
        return self._verifier_for(archive_path).verify_integrity(archive_path)

    def list_entries(self, archive_path: str) -> List[str]:
        """Names of the files stored in the archive."""
        return self._verifier_for(archive_path).list_entries(archive_path)

    def get_archive_info(self, archive_path: str) -> Dict[str, Any]:
        """Size, timestamps and entry counts of an archive, plus its integrity."""
        if not os.path.exists(archive_path):
            raise FileNotFoundError(f"Archive not found: {archive_path}")

        st = os.stat(archive_path)
        info = {
            "path": archive_path,
            "size_bytes": st.st_size,
            "modified_time": datetime.fromtimestamp(st.st_mtime).isoformat(),
            "format": "zstd" if archive_path.endswith(".zst") else "zip",
            "valid": self.verify_archive_integrity(archive_path),
        }
        # Entry counts are only meaningful for an archive that reads back cleanly
        if info["valid"]:
            info.update(self._verifier_for(archive_path).get_archive_info(archive_path))
        return info
