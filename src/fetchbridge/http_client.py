"""
HTTP session factory and bounded redirect following.

Redirects are followed manually (allow_redirects=False) so that every hop
is counted against the configured cap and logged.
"""

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator, Dict
from urllib.parse import urljoin

import aiohttp

from fetchbridge.config import FetchConfig
from fetchbridge.errors import TooManyRedirectsError
from fetchbridge.logging.setup import get_logger
from fetchbridge.logging.utilities import log_with_context

logger = get_logger(__name__)

REDIRECT_STATUSES = frozenset({301, 302, 303, 307, 308})


@dataclass
class FollowedResponse:
    """
    Final response of a redirect chain.

    Attributes:
        response: Open aiohttp response (body not yet read)
        final_url: URL of the request that produced the response
        redirect_count: Number of redirects followed to get here
    """

    response: aiohttp.ClientResponse
    final_url: str
    redirect_count: int

    @property
    def status(self) -> int:
        return self.response.status


def build_timeout(config: FetchConfig) -> aiohttp.ClientTimeout:
    """Per-request timeout: connect limit plus per-read limit, no total cap."""
    return aiohttp.ClientTimeout(
        total=None,
        connect=config.connect_timeout,
        sock_read=config.read_timeout,
    )


def build_headers(config: FetchConfig) -> Dict[str, str]:
    return {"User-Agent": config.user_agent}


def create_session(
    config: FetchConfig,
    max_connections: int = 10,
    max_connections_per_host: int = 4,
) -> aiohttp.ClientSession:
    """
    Create an aiohttp session configured for fetch calls.

    Args:
        config: Fetch configuration (timeouts, user agent)
        max_connections: Total connection pool size
        max_connections_per_host: Per-host connection limit

    Returns:
        New ClientSession; caller is responsible for closing it
    """
    connector = aiohttp.TCPConnector(
        limit=max_connections,
        limit_per_host=max_connections_per_host,
    )
    return aiohttp.ClientSession(
        connector=connector,
        timeout=build_timeout(config),
        headers=build_headers(config),
    )


@asynccontextmanager
async def open_followed(
    session: aiohttp.ClientSession,
    url: str,
    config: FetchConfig,
) -> AsyncIterator[FollowedResponse]:
    """
    GET a URL, following up to config.max_redirects redirects.

    Relative Location headers are resolved against the URL that returned
    them. A redirect without a Location header is returned as the final
    response. The final response is yielded open and released on exit.

    Raises:
        TooManyRedirectsError: Chain is longer than config.max_redirects
        aiohttp.ClientError / asyncio.TimeoutError: Transport failures
    """
    current_url = url
    redirect_count = 0
    timeout = build_timeout(config)
    headers = build_headers(config)

    while True:
        response = await session.get(
            current_url,
            allow_redirects=False,
            timeout=timeout,
            headers=headers,
        )

        if response.status not in REDIRECT_STATUSES:
            break

        location = response.headers.get("Location")
        if not location:
            # Nothing to follow; the redirect itself is the final response
            break

        status = response.status
        response.release()

        if redirect_count >= config.max_redirects:
            log_with_context(
                logger,
                logging.WARNING,
                "Too many redirects",
                download_url=url,
                redirect_count=redirect_count,
                max_redirects=config.max_redirects,
            )
            raise TooManyRedirectsError(config.max_redirects, url)

        redirect_count += 1
        next_url = urljoin(current_url, location)
        log_with_context(
            logger,
            logging.DEBUG,
            "Following redirect",
            http_status=status,
            redirect_url=next_url,
            redirect_count=redirect_count,
        )
        current_url = next_url

    try:
        yield FollowedResponse(
            response=response,
            final_url=str(response.url),
            redirect_count=redirect_count,
        )
    finally:
        response.release()
