"""
Downloader with redirect resolution.

Provides Downloader class with two operations:
- download(): stream a URL to a local path
- resolve(): follow redirects and derive a filename

Clean interface: url -> DownloadOutcome / RedirectInfo
"""

import asyncio
import logging
import os
import time
from pathlib import Path
from typing import Optional, Union

import aiofiles
import aiohttp

from fetchbridge import metrics
from fetchbridge.config import FetchConfig
from fetchbridge.errors import (
    ErrorCategory,
    FetchError,
    FileWriteError,
    HttpStatusError,
    ValidationError,
    wrap_exception,
)
from fetchbridge.filename import resolve_filename
from fetchbridge.http_client import FollowedResponse, create_session, open_followed
from fetchbridge.logging.context import log_context
from fetchbridge.logging.setup import get_logger
from fetchbridge.logging.utilities import log_exception, log_with_context
from fetchbridge.models import DownloadOutcome, RedirectInfo
from fetchbridge.progress import ProgressCallback, ProgressTracker
from fetchbridge.security import validate_request_url
from fetchbridge.subscription import parse_subscription_info

logger = get_logger(__name__)

PART_SUFFIX = ".part"


class Downloader:
    """
    Downloads files and resolves redirect chains.

    Usage:
        downloader = Downloader()
        outcome = await downloader.download(
            "https://example.com/file.zip", Path("out/file.zip")
        )
        if outcome.success:
            print(f"Downloaded {outcome.bytes_downloaded} bytes")

        info = await downloader.resolve("https://example.com/latest")
        print(info.final_url, info.filename)

    Session management:
        By default, creates a new session for each call.
        For batches, pass a shared session to the constructor:

        async with create_session(config) as session:
            downloader = Downloader(config, session=session)
            for url in urls:
                info = await downloader.resolve(url)
    """

    def __init__(
        self,
        config: Optional[FetchConfig] = None,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        """
        Initialize Downloader.

        Args:
            config: Fetch configuration (None = load from environment)
            session: Optional aiohttp session (None = create per call)
        """
        self.config = config or FetchConfig.from_env()
        self._session = session

    async def download(
        self,
        url: str,
        destination: Union[str, Path],
        on_progress: Optional[ProgressCallback] = None,
    ) -> DownloadOutcome:
        """
        Download url to destination.

        Parent directories are created as needed. Only a final status of
        200 counts as success. The body is streamed to a sibling ``.part``
        file which replaces destination once complete, so a failed call
        never leaves a truncated file behind.

        Args:
            url: Source URL (http or https)
            destination: Target file path
            on_progress: Optional callback for throttled progress updates

        Returns:
            DownloadOutcome; failures are reported, not raised
        """
        destination = Path(destination)
        start = time.perf_counter()

        with log_context("download"):
            outcome = await self._download(url, destination, on_progress)
            duration = time.perf_counter() - start

            if outcome.success:
                log_with_context(
                    logger,
                    logging.INFO,
                    "Download complete",
                    download_url=url,
                    final_url=outcome.final_url,
                    destination=str(destination),
                    bytes_downloaded=outcome.bytes_downloaded,
                    redirect_count=outcome.redirect_count,
                    duration_ms=round(duration * 1000, 2),
                )
            else:
                log_with_context(
                    logger,
                    logging.WARNING,
                    "Download failed",
                    download_url=url,
                    destination=str(destination),
                    http_status=outcome.status_code,
                    error_category=outcome.error_category.value
                    if outcome.error_category
                    else None,
                    error_message=outcome.error_message,
                    duration_ms=round(duration * 1000, 2),
                )

        metrics.record_download(
            success=outcome.success,
            duration_seconds=duration,
            bytes_downloaded=outcome.bytes_downloaded,
            error_category=outcome.error_category.value if outcome.error_category else "",
        )
        return outcome

    async def resolve(self, url: str) -> RedirectInfo:
        """
        Follow url's redirect chain and derive a filename.

        The final status is not checked and the body is not read.

        Args:
            url: URL to resolve (http or https)

        Returns:
            RedirectInfo with final URL and filename

        Raises:
            ValidationError: URL is empty or not http(s)
            TooManyRedirectsError: More than config.max_redirects redirects
            FetchError: Any other network failure, wrapped
        """
        with log_context("resolve"):
            try:
                info = await self._resolve(url)
            except FetchError as e:
                metrics.record_resolve(success=False, error_category=e.category.value)
                log_exception(
                    logger,
                    e,
                    "Resolve failed",
                    level=logging.WARNING,
                    include_traceback=False,
                    download_url=url,
                )
                raise

            metrics.record_resolve(success=True)
            metrics.record_redirects(info.redirect_count)
            log_with_context(
                logger,
                logging.INFO,
                "Resolved redirect chain",
                download_url=url,
                final_url=info.final_url,
                resolved_filename=info.filename,
                redirect_count=info.redirect_count,
                http_status=info.status_code,
            )
            return info

    async def _resolve(self, url: str) -> RedirectInfo:
        is_valid, error = validate_request_url(url)
        if not is_valid:
            raise ValidationError(f"URL validation failed: {error}", context={"url": url})

        session = self._session
        should_close_session = False
        try:
            if session is None:
                session = create_session(self.config)
                should_close_session = True

            async with open_followed(session, url, self.config) as followed:
                filename = resolve_filename(
                    followed.response.headers.get("Content-Disposition"),
                    followed.final_url,
                )
                return RedirectInfo(
                    final_url=followed.final_url,
                    filename=filename,
                    redirect_count=followed.redirect_count,
                    status_code=followed.status,
                )

        except FetchError:
            raise
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise wrap_exception(e, context={"url": url}) from e

        finally:
            if should_close_session and session:
                await session.close()

    async def _download(
        self,
        url: str,
        destination: Path,
        on_progress: Optional[ProgressCallback],
    ) -> DownloadOutcome:
        is_valid, error = validate_request_url(url)
        if not is_valid:
            return DownloadOutcome.failure(
                error_message=f"URL validation failed: {error}",
                error_category=ErrorCategory.PERMANENT,
            )

        if not destination.name:
            return DownloadOutcome.failure(
                error_message=f"Invalid destination path: {str(destination)!r}",
                error_category=ErrorCategory.PERMANENT,
            )

        try:
            await asyncio.to_thread(destination.parent.mkdir, parents=True, exist_ok=True)
        except OSError as e:
            return DownloadOutcome.failure(
                error_message=f"mkdir failed: {e}",
                error_category=ErrorCategory.PERMANENT,
            )

        session = self._session
        should_close_session = False
        try:
            if session is None:
                session = create_session(self.config)
                should_close_session = True

            async with open_followed(session, url, self.config) as followed:
                if followed.status != 200:
                    error = HttpStatusError(followed.status)
                    return DownloadOutcome.failure(
                        error_message=error.message,
                        error_category=error.category,
                        status_code=followed.status,
                        final_url=followed.final_url,
                        redirect_count=followed.redirect_count,
                    )

                bytes_written = await self._stream_to_file(
                    followed, destination, on_progress
                )
                metrics.record_redirects(followed.redirect_count)

                return DownloadOutcome.success_outcome(
                    file_path=destination,
                    bytes_downloaded=bytes_written,
                    status_code=followed.status,
                    content_type=followed.response.content_type,
                    final_url=followed.final_url,
                    redirect_count=followed.redirect_count,
                    subscription_info=parse_subscription_info(
                        followed.response.headers
                    ),
                )

        except FetchError as e:
            return DownloadOutcome.failure(
                error_message=str(e),
                error_category=e.category,
            )
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            wrapped = wrap_exception(e, context={"url": url})
            return DownloadOutcome.failure(
                error_message=f"Request failed: {wrapped.message}",
                error_category=wrapped.category,
            )
        except OSError as e:
            wrapped = FileWriteError(f"File write error: {e}", cause=e)
            return DownloadOutcome.failure(
                error_message=wrapped.message,
                error_category=wrapped.category,
            )

        finally:
            if should_close_session and session:
                await session.close()

    async def _stream_to_file(
        self,
        followed: FollowedResponse,
        destination: Path,
        on_progress: Optional[ProgressCallback],
    ) -> int:
        """
        Stream the response body into destination.

        Returns:
            Number of bytes written
        """
        response = followed.response
        tracker = ProgressTracker(
            total_size=response.content_length,
            callback=on_progress,
            interval_ms=self.config.progress_interval_ms,
        )
        part_path = destination.with_name(destination.name + PART_SUFFIX)

        completed = False
        try:
            async with aiofiles.open(part_path, "wb") as f:
                async for chunk in response.content.iter_chunked(self.config.chunk_size):
                    await f.write(chunk)
                    tracker.update(len(chunk))
            await asyncio.to_thread(os.replace, part_path, destination)
            completed = True
        finally:
            if not completed:
                part_path.unlink(missing_ok=True)

        tracker.finish()
        return tracker.bytes_written


__all__ = ["Downloader"]
