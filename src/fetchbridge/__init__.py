"""
fetchbridge: HTTP download and redirect resolution for host processes.

Boundary functions (synchronous, never raise):
    - download_file(url, save_path) -> 1 / 0
    - get_redirect_info(url) -> "final_url|filename" / ""

Async core:
    - Downloader.download(url, destination) -> DownloadOutcome
    - Downloader.resolve(url) -> RedirectInfo
"""

from fetchbridge.bridge import download_file, get_redirect_info
from fetchbridge.config import FetchConfig
from fetchbridge.downloader import Downloader
from fetchbridge.errors import ErrorCategory, FetchError, TooManyRedirectsError
from fetchbridge.models import (
    DownloadOutcome,
    DownloadProgress,
    RedirectInfo,
    SubscriptionInfo,
)

__version__ = "0.1.0"

__all__ = [
    "download_file",
    "get_redirect_info",
    "Downloader",
    "FetchConfig",
    "ErrorCategory",
    "FetchError",
    "TooManyRedirectsError",
    "DownloadOutcome",
    "DownloadProgress",
    "RedirectInfo",
    "SubscriptionInfo",
]
