"""Tests for link and QR code models."""

from datetime import datetime, timedelta, timezone

import pytest

from shortener_client.gateway.models import Link, QrImage
from shortener_client.gateway.schemas import LinkPayload


@pytest.fixture
def wire_link():
    return {
        "_id": "65f1c0ffee",
        "originalUrl": "https://example.com/very/long/path",
        "shortenUrl": "http://sho.rt/abc123",
        "logo": "https://example.com/favicon.ico",
        "createdAt": "2024-03-01T12:00:00.000Z",
        "expiredIn": None,
    }


class TestLink:
    """Test the link entity."""

    def test_from_dict(self, wire_link):
        link = Link.from_dict(wire_link)

        assert link.id == "65f1c0ffee"
        assert link.shortened_url == "http://sho.rt/abc123"
        assert link.created_at == datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)
        assert link.expired_in is None

    def test_from_dict_alternate_keys(self):
        link = Link.from_dict({
            "id": "x1",
            "originalUrl": "https://example.com",
            "shortenedUrl": "http://sho.rt/x1",
            "createdAt": "2024-03-01T12:00:00+00:00",
            "expiredIn": "2030-01-31T00:00:00Z",
        })

        assert link.id == "x1"
        assert link.shortened_url == "http://sho.rt/x1"
        assert link.expired_in == datetime(2030, 1, 31, tzinfo=timezone.utc)
        assert link.logo is None

    def test_to_dict_uses_wire_keys(self, wire_link):
        data = Link.from_dict(wire_link).to_dict()

        assert data["_id"] == "65f1c0ffee"
        assert data["shortenUrl"] == "http://sho.rt/abc123"
        assert data["expiredIn"] is None

    def test_never_expires_without_date(self, wire_link):
        assert not Link.from_dict(wire_link).is_expired()

    def test_is_expired(self, wire_link):
        now = datetime(2024, 6, 1, tzinfo=timezone.utc)
        past = Link.from_dict({**wire_link, "expiredIn": "2024-05-01T00:00:00Z"})
        future = Link.from_dict({**wire_link, "expiredIn": "2024-07-01T00:00:00Z"})

        assert past.is_expired(now)
        assert not future.is_expired(now)

    def test_naive_expiration_does_not_crash(self, wire_link):
        """A date without a timezone is read as UTC."""
        link = Link.from_dict({**wire_link, "expiredIn": datetime.now(timezone.utc).replace(tzinfo=None) - timedelta(days=1)})

        assert link.is_expired()


class TestLinkPayload:
    """Test the wire schema."""

    def test_to_link(self, wire_link):
        link = LinkPayload.model_validate(wire_link).to_link()

        assert link == Link.from_dict(wire_link)

    def test_ignores_unknown_fields(self, wire_link):
        payload = LinkPayload.model_validate({**wire_link, "user": "u1", "__v": 0})

        assert payload.id == "65f1c0ffee"


class TestQrImage:
    """Test QR image encoding."""

    def test_data_url(self):
        image = QrImage(link_id="x1", data=b"hello", content_type="image/png")

        assert image.to_data_url() == "data:image/png;base64,aGVsbG8="

    def test_from_data_url(self):
        image = QrImage.from_data_url("x1", "data:image/svg+xml;base64,aGVsbG8=")

        assert image.data == b"hello"
        assert image.content_type == "image/svg+xml"

    def test_from_bare_base64(self):
        image = QrImage.from_data_url("x1", "aGVsbG8=")

        assert image.data == b"hello"
        assert image.content_type == "image/png"
