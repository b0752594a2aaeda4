"""
Prometheus metrics for download and resolve calls.

Provides instrumentation for:
- Download and resolve outcomes by status
- Bytes written to disk
- Redirect chain lengths
- Download durations
"""

from prometheus_client import Counter, Histogram

downloads_total = Counter(
    "fetchbridge_downloads_total",
    "Total number of download calls",
    ["status", "error_category"],  # status: success, error
)

download_bytes_total = Counter(
    "fetchbridge_download_bytes_total",
    "Total bytes written by successful downloads",
)

download_duration_seconds = Histogram(
    "fetchbridge_download_duration_seconds",
    "Time spent in download calls",
    buckets=(0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0, 120.0),
)

resolves_total = Counter(
    "fetchbridge_resolves_total",
    "Total number of redirect resolution calls",
    ["status", "error_category"],
)

redirects_followed = Histogram(
    "fetchbridge_redirects_followed",
    "Number of redirects followed per request",
    buckets=(0, 1, 2, 3, 5, 10),
)


def record_download(
    success: bool,
    duration_seconds: float,
    bytes_downloaded: int = 0,
    error_category: str = "",
) -> None:
    """Record a finished download call."""
    status = "success" if success else "error"
    downloads_total.labels(status=status, error_category=error_category).inc()
    download_duration_seconds.observe(duration_seconds)
    if success:
        download_bytes_total.inc(bytes_downloaded)


def record_resolve(success: bool, error_category: str = "") -> None:
    """Record a finished resolve call."""
    status = "success" if success else "error"
    resolves_total.labels(status=status, error_category=error_category).inc()


def record_redirects(count: int) -> None:
    redirects_followed.observe(count)
