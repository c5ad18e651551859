"""Tests for create-link form shaping."""

from datetime import date, datetime, timezone

import pytest

from shortener_client.errors import ValidationError
from shortener_client.forms import ShortLinkForm, shape_link_input


class TestShapeLinkInput:
    """Test turning raw form values into create arguments."""

    def test_url_only(self):
        assert shape_link_input("https://example.com") == ("https://example.com", None)

    def test_url_is_trimmed(self):
        url, _ = shape_link_input("  https://example.com/path  ")

        assert url == "https://example.com/path"

    def test_empty_url(self):
        with pytest.raises(ValidationError, match="URL can't be empty"):
            shape_link_input("")

    def test_invalid_url(self):
        with pytest.raises(ValidationError, match="Invalid URL"):
            shape_link_input("not-a-url")

    def test_date_string_becomes_datetime(self):
        _, expired_in = shape_link_input("https://example.com", "2999-01-31")

        assert expired_in == datetime(2999, 1, 31, tzinfo=timezone.utc)

    def test_iso_timestamp_accepted(self):
        _, expired_in = shape_link_input("https://example.com", "2999-01-31T10:30:00Z")

        assert expired_in == datetime(2999, 1, 31, 10, 30, tzinfo=timezone.utc)

    def test_toggle_off_drops_date(self):
        """With the expiration switch off the date input is ignored."""
        _, expired_in = shape_link_input("https://example.com", "2999-01-31", expiration_enabled=False)

        assert expired_in is None

    def test_toggle_on_without_date(self):
        _, expired_in = shape_link_input("https://example.com", "", expiration_enabled=True)

        assert expired_in is None

    def test_past_date_rejected(self):
        with pytest.raises(ValidationError, match="must be in the future"):
            shape_link_input("https://example.com", "2000-01-01")

    def test_unparseable_date(self):
        with pytest.raises(ValidationError, match="Invalid expiration date"):
            shape_link_input("https://example.com", "next tuesday")

    def test_validation_error_is_a_value_error(self):
        with pytest.raises(ValueError):
            shape_link_input("")


class TestShortLinkForm:
    """Test the pydantic form model directly."""

    def test_date_object(self):
        form = ShortLinkForm(url="https://example.com", expiration_enabled=True, expired_in=date(2999, 5, 1))

        assert form.to_create_args() == ("https://example.com", datetime(2999, 5, 1, tzinfo=timezone.utc))

    def test_defaults(self):
        form = ShortLinkForm(url="https://example.com")

        assert form.expiration_enabled is False
        assert form.expired_in is None
