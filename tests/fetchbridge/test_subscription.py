"""Tests for subscription header parsing."""

from datetime import datetime, timezone

import pytest

from fetchbridge.subscription import (
    DEFAULT_INTERVAL_HOURS,
    parse_expire_date,
    parse_subscription_info,
    parse_userinfo,
)


class TestParseUserinfo:
    """Test Subscription-Userinfo parsing."""

    def test_all_fields(self):
        value = "upload=455727941; download=6174315083; total=1073741824000; expire=1671815872"

        assert parse_userinfo(value) == {
            "upload": 455727941,
            "download": 6174315083,
            "total": 1073741824000,
            "expire": 1671815872,
        }

    def test_spacing_and_case(self):
        assert parse_userinfo("Upload = 1;DOWNLOAD=2") == {"upload": 1, "download": 2}

    def test_ignores_non_numeric(self):
        assert parse_userinfo("upload=abc; total=5") == {"total": 5}


class TestParseExpireDate:
    """Test Expires header parsing."""

    def test_epoch_seconds(self):
        assert parse_expire_date("1700000000") == datetime(
            2023, 11, 14, 22, 13, 20, tzinfo=timezone.utc
        )

    def test_iso_date(self):
        assert parse_expire_date("2030-01-31") == datetime(2030, 1, 31, tzinfo=timezone.utc)

    def test_http_date(self):
        assert parse_expire_date("Wed, 21 Oct 2015 07:28:00 GMT") == datetime(
            2015, 10, 21, 7, 28, tzinfo=timezone.utc
        )

    @pytest.mark.parametrize("value", ["never", "2030-13-45", ""])
    def test_unparseable(self, value):
        assert parse_expire_date(value) is None


class TestParseSubscriptionInfo:
    """Test building SubscriptionInfo from headers."""

    def test_full_headers(self):
        info = parse_subscription_info(
            {
                "Subscription-Userinfo": "upload=100; download=200; total=1000; expire=1700000000",
                "Profile-Title": "My Profile",
                "Profile-Update-Interval": "12",
            }
        )

        assert info.upload == 100
        assert info.download == 200
        assert info.total == 1000
        assert info.used == 300
        assert info.expire == datetime.fromtimestamp(1700000000, tz=timezone.utc)
        assert info.title == "My Profile"
        assert info.interval == 12

    def test_no_subscription_headers(self):
        assert parse_subscription_info({"Content-Type": "text/plain"}) is None

    def test_title_only_uses_defaults(self):
        info = parse_subscription_info({"subscription-title": "Work"})

        assert info.title == "Work"
        assert info.upload == 0
        assert info.expire is None
        assert info.interval == DEFAULT_INTERVAL_HOURS

    def test_expires_header_used_without_userinfo_expire(self):
        info = parse_subscription_info(
            {"subscription-userinfo": "total=10", "expires": "2030-01-31"}
        )

        assert info.expire == datetime(2030, 1, 31, tzinfo=timezone.utc)

    @pytest.mark.parametrize("interval", ["soon", "-5"])
    def test_bad_interval_falls_back(self, interval):
        info = parse_subscription_info({"profile-update-interval": interval})

        assert info.interval == DEFAULT_INTERVAL_HOURS
