"""
Value objects passed between the downloader and its callers.

Clean interface: url -> DownloadOutcome / RedirectInfo
"""

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field

from fetchbridge.errors import ErrorCategory

# Separator between final URL and filename in the resolve wire format
WIRE_SEPARATOR = "|"


class SubscriptionInfo(BaseModel):
    """Usage and refresh metadata advertised by subscription servers.

    Attributes:
        upload: Bytes uploaded in the current period
        download: Bytes downloaded in the current period
        total: Traffic quota in bytes (0 if unlimited or not advertised)
        expire: Subscription expiry, None if not advertised
        title: Display title for the profile
        interval: Suggested refresh interval in hours

    Example:
        >>> info = SubscriptionInfo(upload=1024, download=2048, total=10737418240)
        >>> info.interval
        24
    """

    upload: int = Field(default=0, ge=0)
    download: int = Field(default=0, ge=0)
    total: int = Field(default=0, ge=0)
    expire: Optional[datetime] = None
    title: Optional[str] = None
    interval: int = Field(default=24, ge=0)

    @property
    def used(self) -> int:
        return self.upload + self.download


@dataclass
class DownloadProgress:
    """
    Snapshot of an in-flight download.

    Attributes:
        progress: Percent complete (0 when total size is unknown)
        current_size: Bytes written so far
        total_size: Content-Length, or -1 if the server did not send one
        speed: Human-readable transfer rate (e.g. "1.5 MB/s")
    """

    progress: int
    current_size: int
    total_size: int
    speed: str


@dataclass
class DownloadOutcome:
    """
    Result of a download operation.

    Attributes:
        success: Whether the file was written completely
        file_path: Destination path (None on failure)
        bytes_downloaded: Bytes written to disk
        status_code: Final HTTP status, None if no response was received
        content_type: Content-Type of the final response
        final_url: URL that served the body after redirects
        redirect_count: Number of redirects followed
        error_message: Failure description
        error_category: Failure classification
        subscription_info: Parsed subscription headers, if any were sent
    """

    success: bool
    file_path: Optional[Path] = None
    bytes_downloaded: int = 0
    status_code: Optional[int] = None
    content_type: Optional[str] = None
    final_url: Optional[str] = None
    redirect_count: int = 0
    error_message: Optional[str] = None
    error_category: Optional[ErrorCategory] = None
    subscription_info: Optional[SubscriptionInfo] = None

    @classmethod
    def success_outcome(
        cls,
        file_path: Path,
        bytes_downloaded: int,
        status_code: int = 200,
        content_type: Optional[str] = None,
        final_url: Optional[str] = None,
        redirect_count: int = 0,
        subscription_info: Optional[SubscriptionInfo] = None,
    ) -> "DownloadOutcome":
        return cls(
            success=True,
            file_path=file_path,
            bytes_downloaded=bytes_downloaded,
            status_code=status_code,
            content_type=content_type,
            final_url=final_url,
            redirect_count=redirect_count,
            subscription_info=subscription_info,
        )

    @classmethod
    def failure(
        cls,
        error_message: str,
        error_category: ErrorCategory,
        status_code: Optional[int] = None,
        final_url: Optional[str] = None,
        redirect_count: int = 0,
    ) -> "DownloadOutcome":
        return cls(
            success=False,
            status_code=status_code,
            final_url=final_url,
            redirect_count=redirect_count,
            error_message=error_message,
            error_category=error_category,
        )


@dataclass(frozen=True)
class RedirectInfo:
    """
    Result of resolving a URL through its redirect chain.

    Attributes:
        final_url: URL of the last request in the chain
        filename: Filename derived from headers or URL
        redirect_count: Number of redirects followed
        status_code: Status of the final response (not checked)
    """

    final_url: str
    filename: str
    redirect_count: int = 0
    status_code: Optional[int] = None

    def to_wire(self) -> str:
        """Encode as ``final_url|filename``."""
        return f"{self.final_url}{WIRE_SEPARATOR}{self.filename}"
