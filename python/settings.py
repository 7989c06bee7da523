import json
import logging
import os
import sys
from typing import Any, List, Optional

from backup_ops.archive_creators import ArchiveCreatorFactory
from backup_ops.path_filter import DEFAULT_EXCLUDED_NAMES
from backup_ops.shortcut_resolver import DEFAULT_SHORTCUT_SUFFIXES

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)

SETTINGS_ENV_VAR = "BACKUP_SETTINGS"


class Settings:
    """
    Manages loading and validation of backup settings from an optional JSON file.
    Every key is optional; missing keys fall back to the built-in defaults.
    """

    def __init__(self, settings_file: Optional[str] = None) -> None:
        """
        Loads settings from the specified file, then populates instance variables.
        Exits the program if a file was named but is missing or invalid.

        :param settings_file: Path to a JSON settings file. Defaults to the file
            named by the ``BACKUP_SETTINGS`` environment variable, if any.
        """
        settings_file = settings_file or os.environ.get(SETTINGS_ENV_VAR, "")
        self.settings_file: str = settings_file
        self.raw: dict = {}

        if settings_file:
            if not os.path.isfile(settings_file):
                logger.critical(
                    "Settings file not found at '%s'. Exiting...", settings_file
                )
                sys.exit(1)

            self.raw = self._load_json(settings_file)
            if not isinstance(self.raw, dict):
                logger.critical(
                    "Settings file '%s' appears to be empty or invalid. Exiting...",
                    settings_file,
                )
                sys.exit(1)

        # Naming and filtering
        self.shortcut_suffixes: List[str] = self._string_list(
            "shortcut_suffixes", DEFAULT_SHORTCUT_SUFFIXES
        )
        self.excluded_names: List[str] = self._string_list(
            "excluded_names", DEFAULT_EXCLUDED_NAMES
        )

        # Archive output
        self.compression_format: str = self.raw.get("compression_format", "zip")
        if self.compression_format not in ("zip", "zstd"):
            logger.warning(
                "Unknown compression_format '%s', using zip", self.compression_format
            )
            self.compression_format = "zip"
        self.compression_level: Optional[int] = self.raw.get("compression_level")
        if self.compression_level is None:
            self.compression_level = ArchiveCreatorFactory.DEFAULT_COMPRESSION_LEVEL[
                self.compression_format
            ]
        self.verify_archives: bool = bool(self.raw.get("verify_archives", False))

        # Execution
        self.workers: int = max(1, int(self.raw.get("workers", 1)))
        self.log_level: str = str(self.raw.get("log_level", "INFO")).upper()

        if settings_file:
            logger.info("Settings loaded from '%s'.", settings_file)

    def _string_list(self, key: str, default) -> List[str]:
        value = self.raw.get(key)
        if value is None:
            return list(default)
        if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
            logger.warning("Setting '%s' must be a list of strings; using defaults", key)
            return list(default)
        return value

    def _load_json(self, path: str) -> Any:
        """
        Loads JSON from the given file path.

        :param path: The path to the JSON file.
        :return: The parsed JSON if valid, otherwise None.
        """
        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.error("Error loading JSON file '%s': %s", path, e)
            return None
