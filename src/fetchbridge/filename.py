"""
Filename derivation for resolved downloads.

Order of preference:
1. Content-Disposition header (plain ``filename=`` or RFC 5987 ``filename*=``)
2. Last segment of the URL path
3. ``filename`` query parameter
4. DEFAULT_FILENAME
"""

import posixpath
import re
from typing import Optional
from urllib.parse import parse_qs, unquote, unquote_plus, urlparse

DEFAULT_FILENAME = "download"
UNPARSEABLE_FILENAME = "unknown"

# A '%' not followed by two hex digits
_BAD_PERCENT_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


def filename_from_content_disposition(header: Optional[str]) -> Optional[str]:
    """
    Extract filename from a Content-Disposition header value.

    Parameters are scanned in header order and the first ``filename`` or
    ``filename*`` parameter wins. Extended values have their charset and
    language prefix dropped and are percent-decoded; if decoding fails the
    undecoded value is returned.

    Args:
        header: Raw header value, or None

    Returns:
        Filename (possibly empty), or None if the header names no filename

    Examples:
        >>> filename_from_content_disposition('attachment; filename="a b.zip"')
        'a b.zip'

        >>> filename_from_content_disposition("attachment; filename*=UTF-8''%E6%B5%8B.yaml")
        '测.yaml'
    """
    if not header:
        return None

    for part in header.split(";"):
        part = part.strip()
        key, sep, value = part.partition("=")
        if not sep:
            continue
        key = key.strip().lower()

        if key == "filename":
            return value.strip('"')

        if key == "filename*":
            charset = "utf-8"
            if "''" in value:
                prefix, _, value = value.partition("''")
                charset = prefix.strip('"').split("'", 1)[0] or "utf-8"
            value = value.strip('"')
            return _decode_extended_value(value, charset)

    return None


def _decode_extended_value(value: str, charset: str) -> str:
    if _BAD_PERCENT_ESCAPE.search(value):
        return value
    try:
        return unquote_plus(value, encoding=charset, errors="strict")
    except (LookupError, UnicodeDecodeError):
        return value


def filename_from_url(url: str) -> str:
    """
    Derive filename from the last segment of a URL path.

    Trailing slashes are ignored (``/files/dir/`` gives ``dir``). When the
    path has no usable segment the ``filename`` query parameter is used,
    then DEFAULT_FILENAME.

    Args:
        url: Absolute or relative URL

    Returns:
        Filename, or UNPARSEABLE_FILENAME if the URL cannot be parsed
    """
    try:
        parsed = urlparse(url)
    except ValueError:
        return UNPARSEABLE_FILENAME

    path = unquote(parsed.path)
    stripped = path.rstrip("/")
    if not path:
        name = "."
    elif not stripped:
        name = "/"
    else:
        name = posixpath.basename(stripped)

    if name in ("", "/", "."):
        values = parse_qs(parsed.query).get("filename")
        if values and values[0]:
            return values[0]
        return DEFAULT_FILENAME

    return name


def resolve_filename(content_disposition: Optional[str], url: str) -> str:
    """
    Pick the filename for a response.

    Args:
        content_disposition: Content-Disposition header value, or None
        url: Final URL after redirects

    Returns:
        Non-empty filename
    """
    filename = filename_from_content_disposition(content_disposition)
    if not filename or filename == UNPARSEABLE_FILENAME:
        filename = filename_from_url(url)
    return filename
