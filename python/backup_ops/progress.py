"""
Progress reporting for archive jobs.
"""

import sys
import threading
from typing import Optional, TextIO
from colored_logger import get_colored_logger

logger = get_colored_logger(__name__)


def progress_percentage(index: int, total: int) -> int:
    """Whole percentage for entry ``index`` of ``total``, truncated toward zero."""
    if total <= 0:
        return 0
    return (index * 100) // total


class ConsoleProgressReporter:
    """Thread-safe in-place progress line on the console."""

    def __init__(self, stream: Optional[TextIO] = None, show_entries: bool = True):
        self._stream = stream
        self.show_entries = show_entries
        self._lock = threading.Lock()
        self._line_open = False

    @property
    def stream(self) -> TextIO:
        return self._stream or sys.stdout

    def update(self, index: int, total: int, archive_name: str) -> None:
        """Overwrite the progress line with entry ``index`` of ``total``."""
        if total <= 0 or not self.show_entries:
            return
        with self._lock:
            pct = progress_percentage(index, total)
            self.stream.write(f"[{pct:3d}%] {archive_name}\r")
            self.stream.flush()
            self._line_open = True

    def finish(self, count: int, output_path: str) -> None:
        """Close the progress line and print the summary."""
        with self._lock:
            if self._line_open:
                self.stream.write("\n")
                self._line_open = False
            self.stream.write(f"Done: {count} items -> {output_path}\n")
            self.stream.flush()


class LoggingProgressReporter:
    """Per-job progress through the log, for jobs running side by side."""

    def __init__(self, job_name: str, steps: int = 20):
        self.job_name = job_name
        self.steps = max(1, steps)

    def should_report_progress(self, index: int, total: int) -> bool:
        """Determine if progress should be reported for current entry."""
        return index % max(1, total // self.steps) == 0 or index == total - 1

    def update(self, index: int, total: int, archive_name: str) -> None:
        if total <= 0 or not self.should_report_progress(index, total):
            return
        logger.progress(
            "[%s] [%3d%%] %s", self.job_name, progress_percentage(index, total), archive_name
        )

    def finish(self, count: int, output_path: str) -> None:
        logger.progress("[%s] Done: %d items -> %s", self.job_name, count, output_path)
