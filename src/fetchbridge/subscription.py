"""Parsing of subscription metadata response headers."""

import re
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Mapping, Optional

from fetchbridge.models import SubscriptionInfo

USERINFO_HEADER = "subscription-userinfo"
TITLE_HEADERS = ("profile-title", "subscription-title")
INTERVAL_HEADERS = ("profile-update-interval", "subscription-update-interval")
EXPIRES_HEADER = "expires"

DEFAULT_INTERVAL_HOURS = 24

_USERINFO_FIELD = re.compile(r"(upload|download|total|expire)\s*=\s*(\d+)", re.IGNORECASE)
_ISO_DATE = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})")


def parse_userinfo(value: str) -> dict:
    """
    Parse a Subscription-Userinfo header value.

    Args:
        value: e.g. "upload=455727941; download=6174315083; total=1073741824000; expire=1671815872"

    Returns:
        Dict of the numeric fields present (lowercase keys)
    """
    return {m.group(1).lower(): int(m.group(2)) for m in _USERINFO_FIELD.finditer(value)}


def parse_expire_date(value: str) -> Optional[datetime]:
    """
    Parse an expiry value from the Expires header.

    Accepts epoch seconds, a ``YYYY-MM-DD`` date (midnight UTC), or an
    HTTP-date.

    Returns:
        Timezone-aware datetime, or None if unparseable
    """
    value = value.strip()
    if value.isdigit():
        return datetime.fromtimestamp(int(value), tz=timezone.utc)

    match = _ISO_DATE.match(value)
    if match:
        year, month, day = (int(g) for g in match.groups())
        try:
            return datetime(year, month, day, tzinfo=timezone.utc)
        except ValueError:
            return None

    try:
        parsed = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def parse_subscription_info(headers: Mapping[str, str]) -> Optional[SubscriptionInfo]:
    """
    Build SubscriptionInfo from response headers.

    Args:
        headers: Response headers (any casing)

    Returns:
        SubscriptionInfo, or None if no subscription header is present
    """
    lowered = {k.lower(): v for k, v in headers.items()}

    userinfo_raw = lowered.get(USERINFO_HEADER)
    title = next((lowered[h] for h in TITLE_HEADERS if lowered.get(h)), None)
    interval_raw = next((lowered[h] for h in INTERVAL_HEADERS if lowered.get(h)), None)

    if userinfo_raw is None and title is None and interval_raw is None:
        return None

    userinfo = parse_userinfo(userinfo_raw or "")

    expire: Optional[datetime] = None
    if "expire" in userinfo:
        expire = datetime.fromtimestamp(userinfo["expire"], tz=timezone.utc)
    elif lowered.get(EXPIRES_HEADER):
        expire = parse_expire_date(lowered[EXPIRES_HEADER])

    interval = DEFAULT_INTERVAL_HOURS
    if interval_raw is not None:
        try:
            interval = int(interval_raw.strip())
        except ValueError:
            interval = DEFAULT_INTERVAL_HOURS
        if interval < 0:
            interval = DEFAULT_INTERVAL_HOURS

    return SubscriptionInfo(
        upload=userinfo.get("upload", 0),
        download=userinfo.get("download", 0),
        total=userinfo.get("total", 0),
        expire=expire,
        title=title,
        interval=interval,
    )
