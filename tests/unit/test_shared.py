"""
Unit tests for the shared/ utility modules.

Covers:
- shared.ip_utils        (resolve_client_ip, get_client_ip)
- shared.datetime_utils  (utc_now_iso)
- shared.logging         (hash_ip, redact_sensitive_fields)
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest

import shared.logging as shared_logging
from shared.datetime_utils import ISO_UTC_FORMAT, utc_now_iso
from shared.ip_utils import UNKNOWN_IP, get_client_ip, resolve_client_ip
from shared.logging import hash_ip, redact_sensitive_fields


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _make_request(headers: dict, client_host="10.0.0.1", client_port=54321) -> MagicMock:
    """Minimal mock of a FastAPI Request."""
    req = MagicMock()
    req.headers = headers
    req.client = MagicMock()
    req.client.host = client_host
    req.client.port = client_port
    return req


# ---------------------------------------------------------------------------
# shared.ip_utils — resolve_client_ip
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "forwarded_for, real_ip, remote_addr, expected",
    [
        ("1.2.3.4, 5.6.7.8", "9.9.9.9", "10.0.0.1:80", "1.2.3.4"),
        ("  1.2.3.4  ", None, None, "1.2.3.4"),
        (None, "7.7.7.7", "10.0.0.1:80", "7.7.7.7"),
        (None, " 7.7.7.7 ", None, " 7.7.7.7 "),
        (None, None, "9.9.9.9:54321", "9.9.9.9"),
        (None, None, "9.9.9.9", "9.9.9.9"),
        (None, None, "::1:54321", "::1"),
        ("", "", "", UNKNOWN_IP),
        (None, None, None, UNKNOWN_IP),
        ("not-an-ip", None, None, "not-an-ip"),
    ],
    ids=[
        "forwarded_first_entry",
        "forwarded_trimmed",
        "real_ip",
        "real_ip_verbatim",
        "peer_port_stripped",
        "peer_without_port",
        "peer_ipv6_last_colon",
        "all_empty",
        "all_missing",
        "no_syntax_validation",
    ],
)
def test_resolve_client_ip(forwarded_for, real_ip, remote_addr, expected):
    assert resolve_client_ip(forwarded_for, real_ip, remote_addr) == expected


# ---------------------------------------------------------------------------
# shared.ip_utils — get_client_ip
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "headers, expected_ip",
    [
        ({"X-Forwarded-For": "1.2.3.4, 5.6.7.8"}, "1.2.3.4"),
        ({"X-Real-IP": "5.6.7.8"}, "5.6.7.8"),
        ({"X-Forwarded-For": "1.2.3.4", "X-Real-IP": "5.6.7.8"}, "1.2.3.4"),
        ({}, "10.0.0.1"),
    ],
    ids=["forwarded", "real_ip", "forwarded_beats_real_ip", "peer"],
)
def test_get_client_ip(headers, expected_ip):
    assert get_client_ip(_make_request(headers)) == expected_ip


def test_get_client_ip_strips_peer_port():
    req = _make_request({}, client_host="9.9.9.9", client_port=54321)
    assert get_client_ip(req) == "9.9.9.9"


def test_get_client_ip_no_client_returns_unknown():
    req = MagicMock()
    req.headers = {}
    req.client = None
    assert get_client_ip(req) == UNKNOWN_IP


# ---------------------------------------------------------------------------
# shared.datetime_utils
# ---------------------------------------------------------------------------


class TestUtcNowIso:
    def test_formats_aware_datetime(self):
        dt = datetime(2024, 5, 1, 12, 30, 15, tzinfo=timezone.utc)
        assert utc_now_iso(dt) == "2024-05-01T12:30:15Z"

    def test_converts_other_timezones_to_utc(self):
        dt = datetime(2024, 5, 1, 14, 30, 15, tzinfo=timezone(timedelta(hours=2)))
        assert utc_now_iso(dt) == "2024-05-01T12:30:15Z"

    def test_naive_assumed_utc(self):
        assert utc_now_iso(datetime(2024, 1, 2, 3, 4, 5)) == "2024-01-02T03:04:05Z"

    def test_default_is_now(self):
        parsed = datetime.strptime(utc_now_iso(), ISO_UTC_FORMAT).replace(
            tzinfo=timezone.utc
        )
        assert abs(datetime.now(timezone.utc) - parsed) < timedelta(seconds=5)


# ---------------------------------------------------------------------------
# shared.logging
# ---------------------------------------------------------------------------


class TestHashIp:
    def test_none_passthrough(self):
        assert hash_ip(None) is None

    def test_plain_outside_production(self, monkeypatch):
        monkeypatch.setattr(shared_logging, "_hash_client_ips", False)
        assert hash_ip("1.2.3.4") == "1.2.3.4"

    def test_hashed_in_production(self, monkeypatch):
        monkeypatch.setattr(shared_logging, "_hash_client_ips", True)
        hashed = hash_ip("1.2.3.4")
        assert hashed != "1.2.3.4"
        assert len(hashed) == 16
        assert hashed == hash_ip("1.2.3.4")


class TestRedactSensitiveFields:
    def test_redacts_token_like_keys(self):
        event = {"event": "x", "ipinfo_token": "abc", "secret": "s", "link_id": "l"}
        out = redact_sensitive_fields(None, "info", event)
        assert out["ipinfo_token"] == "***REDACTED***"
        assert out["secret"] == "***REDACTED***"
        assert out["link_id"] == "l"

    def test_reserved_keys_untouched(self):
        out = redact_sensitive_fields(None, "info", {"event": "token_refreshed"})
        assert out["event"] == "token_refreshed"
