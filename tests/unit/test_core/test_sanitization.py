"""Tests for input sanitization and validation helpers."""
import pytest

from wellpulse.core.errors import ValidationError
from wellpulse.core.sanitization import (
    extract_emails,
    parse_seat_limit,
    require_domain,
    sanitize_text,
    validate_domain,
    validate_email,
    validate_phone,
)


@pytest.mark.unit
class TestSanitizeText:

    def test_strips_tags_and_whitespace(self):
        assert sanitize_text("  <b>Hello</b>    World ") == "Hello World"

    def test_max_length(self):
        with pytest.raises(ValidationError, match="exceeds maximum length"):
            sanitize_text("A" * 100, max_length=50)

    def test_is_a_value_error(self):
        with pytest.raises(ValueError):
            sanitize_text(123)

    def test_leftover_angle_bracket_rejected(self):
        with pytest.raises(ValidationError):
            sanitize_text("a < b")


@pytest.mark.unit
class TestDomains:

    @pytest.mark.parametrize("domain", ["acme.com", "mail.acme.co.uk", "ACME.COM", " acme.io "])
    def test_valid(self, domain):
        assert validate_domain(domain) == domain.strip().lower()

    @pytest.mark.parametrize("domain", ["", "acme", "-acme.com", "acme.c", "acme..com", "ac me.com", None])
    def test_invalid(self, domain):
        with pytest.raises(ValidationError) as info:
            validate_domain(domain)
        assert info.value.field == "domain"

    def test_require_domain(self):
        assert require_domain(" Acme.COM ") == "acme.com"
        with pytest.raises(ValidationError):
            require_domain("  ")


@pytest.mark.unit
class TestContactFields:

    def test_email_lowercased(self):
        assert validate_email(" Lead@Acme.COM ") == "lead@acme.com"

    @pytest.mark.parametrize("email", ["lead", "lead@acme", "le ad@acme.com", ""])
    def test_email_invalid(self, email):
        with pytest.raises(ValidationError):
            validate_email(email)

    def test_phone(self):
        assert validate_phone("+1 (555) 010-2030") == "+1 (555) 010-2030"
        assert validate_phone("") is None
        assert validate_phone(None) is None
        with pytest.raises(ValidationError):
            validate_phone("12ab")


@pytest.mark.unit
class TestParseSeatLimit:

    @pytest.mark.parametrize("value,expected", [
        (None, None), ("", None), (5, 5), ("5", 5), (" 7 ", 7), (3.0, 3),
    ])
    def test_accepted(self, value, expected):
        assert parse_seat_limit(value) == expected

    @pytest.mark.parametrize("value", [0, -1, "0", "abc", 2.5, True, False])
    def test_rejected(self, value):
        with pytest.raises(ValidationError) as info:
            parse_seat_limit(value)
        assert info.value.field == "seat_limit"


@pytest.mark.unit
def test_extract_emails_dedupes_in_order():
    values = ["HR: hr@acme.com (Mon-Fri)", "EAP hotline 0800 / eap@care.org", "hr@ACME.com"]
    assert extract_emails(values) == ["hr@acme.com", "eap@care.org"]
