"""Throttled progress reporting for streaming downloads."""

import time
from typing import Callable, Optional

from fetchbridge.models import DownloadProgress

ProgressCallback = Callable[[DownloadProgress], None]

KB = 1024
MB = KB * 1024
GB = MB * 1024


def format_speed(bytes_per_second: float) -> str:
    """
    Format a transfer rate for display.

    Examples:
        >>> format_speed(512)
        '512 B/s'
        >>> format_speed(1536)
        '1.5 KB/s'
        >>> format_speed(3 * 1024 ** 3)
        '3.00 GB/s'
    """
    value = max(int(bytes_per_second), 0)
    if value < KB:
        return f"{value} B/s"
    if value < MB:
        return f"{value / KB:.1f} KB/s"
    if value < GB:
        return f"{value / MB:.1f} MB/s"
    return f"{value / GB:.2f} GB/s"


class ProgressTracker:
    """
    Accumulates bytes written and emits DownloadProgress at most once per
    interval, plus a final report from finish().

    Args:
        total_size: Expected size in bytes, None or <= 0 if unknown
        callback: Receiver of progress snapshots (None disables reporting)
        interval_ms: Minimum time between reports
        clock: Monotonic clock in seconds (injectable for tests)
    """

    def __init__(
        self,
        total_size: Optional[int],
        callback: Optional[ProgressCallback],
        interval_ms: int = 500,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.total_size = total_size if total_size and total_size > 0 else -1
        self._callback = callback
        self._interval = interval_ms / 1000.0
        self._clock = clock
        self.bytes_written = 0
        self._last_report_time = clock()
        self._last_report_bytes = 0

    def update(self, chunk_size: int) -> None:
        self.bytes_written += chunk_size
        if self._callback is None:
            return
        now = self._clock()
        if now - self._last_report_time >= self._interval:
            self._report(now)

    def finish(self) -> None:
        if self._callback is not None:
            self._report(self._clock())

    def _report(self, now: float) -> None:
        elapsed = now - self._last_report_time
        delta = self.bytes_written - self._last_report_bytes
        speed = delta / elapsed if elapsed > 0 else 0

        if self.total_size > 0:
            percent = min(int(self.bytes_written * 100 / self.total_size), 100)
        else:
            percent = 0

        self._callback(
            DownloadProgress(
                progress=percent,
                current_size=self.bytes_written,
                total_size=self.total_size,
                speed=format_speed(speed),
            )
        )
        self._last_report_time = now
        self._last_report_bytes = self.bytes_written
