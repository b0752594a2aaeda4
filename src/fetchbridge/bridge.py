"""
Synchronous entry points for host processes.

Each call runs the async Downloader on a fresh event loop. Every failure
is logged here and collapsed to a flag or an empty string; no exception
crosses this boundary.

    >>> download_file("https://example.com/a.zip", "/tmp/a.zip")
    1
    >>> get_redirect_info("https://example.com/latest")
    'https://cdn.example.com/releases/a-1.2.zip|a-1.2.zip'
"""

import asyncio
import logging
from typing import Optional

from fetchbridge.config import FetchConfig
from fetchbridge.downloader import Downloader
from fetchbridge.logging.setup import get_logger
from fetchbridge.logging.utilities import log_exception

logger = get_logger(__name__)

SUCCESS = 1
FAILURE = 0


def download_file(
    url: str, save_path: str, config: Optional[FetchConfig] = None
) -> int:
    """
    Download url to save_path.

    Args:
        url: Source URL
        save_path: Destination file path; parent directories are created
        config: Optional configuration (None = load from environment)

    Returns:
        1 on success, 0 on any failure
    """
    try:
        outcome = asyncio.run(Downloader(config).download(url, save_path))
    except Exception as e:
        log_exception(logger, e, "download_file failed", download_url=url)
        return FAILURE
    return SUCCESS if outcome.success else FAILURE


def get_redirect_info(url: str, config: Optional[FetchConfig] = None) -> str:
    """
    Resolve url's redirect chain.

    Args:
        url: URL to resolve
        config: Optional configuration (None = load from environment)

    Returns:
        "final_url|filename", or "" on any failure
    """
    try:
        info = asyncio.run(Downloader(config).resolve(url))
    except Exception as e:
        log_exception(
            logger,
            e,
            "get_redirect_info failed",
            level=logging.WARNING,
            include_traceback=False,
            download_url=url,
        )
        return ""
    return info.to_wire()
