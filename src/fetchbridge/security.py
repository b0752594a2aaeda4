"""
URL checks and log sanitization.

Provides:
- Scheme validation for request URLs
- URL sanitization (token removal for logs)
"""

from typing import Optional, Set, Tuple
from urllib.parse import urlparse, urlunparse


# ---------------------------------------------------------------------------
# URL Validation
# ---------------------------------------------------------------------------

ALLOWED_SCHEMES: Set[str] = {"https", "http"}


def validate_request_url(url: str) -> Tuple[bool, Optional[str]]:
    """
    Check that a URL can be requested over HTTP.

    Args:
        url: URL to validate

    Returns:
        (is_valid, error_message)
        - (True, None) if valid
        - (False, "error description") if invalid

    Examples:
        >>> validate_request_url("https://example.com/file.zip")
        (True, None)

        >>> validate_request_url("ftp://example.com/file.zip")
        (False, 'Unsupported scheme: ftp')
    """
    if not url:
        return False, "Empty URL"

    try:
        parsed = urlparse(url)
    except ValueError as e:
        return False, f"Invalid URL format: {e}"

    if parsed.scheme.lower() not in ALLOWED_SCHEMES:
        return False, f"Unsupported scheme: {parsed.scheme or '(none)'}"

    if not parsed.hostname:
        return False, "No hostname in URL"

    return True, None


# ---------------------------------------------------------------------------
# URL Sanitization (for logging)
# ---------------------------------------------------------------------------

# Query parameters that may contain sensitive tokens
SENSITIVE_PARAMS = {
    "sig",
    "signature",
    "x-amz-signature",
    "x-amz-credential",
    "x-amz-security-token",
    "token",
    "access_token",
    "api_key",
    "apikey",
    "key",
    "secret",
    "password",
    "pwd",
    "auth",
    "authorization",
}


def sanitize_url(url: str) -> str:
    """
    Remove sensitive query parameters and userinfo from URL.

    Subscription links commonly carry their access token in the query
    string, so these are redacted before the URL reaches a log line.

    Args:
        url: URL that may contain sensitive parameters

    Returns:
        URL with sensitive parameters replaced with [REDACTED]
    """
    if not url:
        return url

    try:
        parsed = urlparse(url)
    except ValueError:
        return url

    if not parsed.password and not parsed.query:
        return url  # Nothing to sanitize

    if parsed.password:
        netloc = parsed.netloc.rsplit("@", 1)[-1]
        parsed = parsed._replace(netloc=f"[REDACTED]@{netloc}")

    if not parsed.query:
        return urlunparse(parsed)

    sanitized_params = []
    for param in parsed.query.split("&"):
        if "=" in param:
            key, _ = param.split("=", 1)
            if key.lower() in SENSITIVE_PARAMS:
                sanitized_params.append(f"{key}=[REDACTED]")
                continue
        sanitized_params.append(param)

    return urlunparse(parsed._replace(query="&".join(sanitized_params)))
