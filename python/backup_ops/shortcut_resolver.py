"""
Shortcut discovery and resolution.

A shortcut is a platform alias file sitting directly inside the source folder
and pointing at a directory to back up. On Windows these are shell ``.lnk``
files resolved through the shell's COM interface; elsewhere symbolic links to
directories play the same role.
"""

import os
import sys
from typing import Iterable, List, Optional, Protocol

from colored_logger import get_colored_logger
from .errors import ShortcutResolutionError
from .models import ShortcutTarget

if sys.platform == "win32":
    import pythoncom
    import pywintypes
    import win32com.client

logger = get_colored_logger(__name__)

# Suffixes the shell appends to new shortcut names, per locale
DEFAULT_SHORTCUT_SUFFIXES = (" - Shortcut", " - Ярлык")


class ShortcutService(Protocol):
    """Platform capability that recognises shortcut files and resolves them."""

    def is_shortcut(self, path: str) -> bool:
        """Return True if ``path`` is a shortcut this service understands."""
        ...

    def resolve(self, path: str) -> str:
        """Return the absolute target of ``path`` or raise ShortcutResolutionError."""
        ...


class WindowsShellLinkService:
    """Resolves ``.lnk`` files through the Windows shell (IShellLink)."""

    extension = ".lnk"

    def is_shortcut(self, path: str) -> bool:
        return path.lower().endswith(self.extension) and os.path.isfile(path)

    def resolve(self, path: str) -> str:
        pythoncom.CoInitialize()
        try:
            shell = win32com.client.Dispatch("WScript.Shell")
            target = shell.CreateShortCut(os.path.abspath(path)).Targetpath
        except pywintypes.com_error as e:
            raise ShortcutResolutionError(path, f"shell error {e}") from e
        finally:
            pythoncom.CoUninitialize()

        if not target:
            raise ShortcutResolutionError(path, "shortcut has no target path")
        return os.path.abspath(os.path.expandvars(target))


class SymlinkShortcutService:
    """Treats symbolic links as shortcuts on platforms without shell links."""

    def is_shortcut(self, path: str) -> bool:
        return os.path.islink(path)

    def resolve(self, path: str) -> str:
        try:
            os.readlink(path)
            return os.path.realpath(path)
        except (OSError, ValueError) as e:
            raise ShortcutResolutionError(path, str(e)) from e


def default_shortcut_service() -> ShortcutService:
    """Pick the shortcut mechanism native to the running platform."""
    if sys.platform == "win32":
        return WindowsShellLinkService()
    return SymlinkShortcutService()


def derive_display_name(
    link_name: str, suffixes: Iterable[str] = DEFAULT_SHORTCUT_SUFFIXES
) -> str:
    """
    Derive the display name of a shortcut from its filename.

    The final extension is dropped, then the first recognised localised
    suffix found at the end of what remains. A suffix is never stripped when
    nothing would be left of the name.

    >>> derive_display_name("Photos - Shortcut.lnk")
    'Photos'
    """
    stem, _ = os.path.splitext(os.path.basename(link_name))
    for suffix in suffixes:
        if suffix and len(stem) > len(suffix) and stem.endswith(suffix):
            return stem[: -len(suffix)]
    return stem


class ShortcutResolver:
    """Finds the shortcuts in a folder and turns each into a ShortcutTarget."""

    def __init__(
        self,
        service: Optional[ShortcutService] = None,
        suffixes: Iterable[str] = DEFAULT_SHORTCUT_SUFFIXES,
    ):
        self.service = service or default_shortcut_service()
        self.suffixes = tuple(suffixes)

    def find_shortcuts(self, source_folder: str) -> List[str]:
        """Return the shortcut files directly inside ``source_folder``, sorted by name."""
        try:
            names = sorted(os.listdir(source_folder))
        except OSError as e:
            logger.error("Cannot read source folder %s: %s", source_folder, e)
            return []

        return [
            os.path.join(source_folder, name)
            for name in names
            if self.service.is_shortcut(os.path.join(source_folder, name))
        ]

    def display_name(self, link_path: str) -> str:
        return derive_display_name(link_path, self.suffixes)

    def resolve(self, link_path: str) -> ShortcutTarget:
        """Resolve ``link_path`` to its target directory and display name."""
        target_dir = self.service.resolve(link_path)

        if not os.path.isdir(target_dir):
            raise ShortcutResolutionError(
                link_path, f"target {target_dir} is not an existing directory"
            )

        display_name = self.display_name(link_path)
        if not display_name:
            raise ShortcutResolutionError(link_path, "empty display name")

        logger.debug("Resolved %s -> %s (%s)", link_path, target_dir, display_name)
        return ShortcutTarget(
            display_name=display_name, target_dir=target_dir, link_path=link_path
        )
