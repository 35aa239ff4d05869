"""Input sanitization and validation utilities."""
import re
from typing import Iterable, List, Optional

from wellpulse.core.errors import ValidationError


# Maximum length constraints
MAX_DOMAIN_LENGTH = 253
MAX_QUESTION_LENGTH = 500
MAX_NOTE_LENGTH = 2000
MAX_NAME_LENGTH = 100

DOMAIN_RE = re.compile(r"^(?!-)(?:[a-zA-Z0-9-]{1,63}\.)+[A-Za-z]{2,}$")
EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_RE = re.compile(r"^[0-9+\-() ]{6,20}$")
# Loose pattern for pulling addresses out of free-text contact blurbs
EMBEDDED_EMAIL_RE = re.compile(r"[A-Z0-9._%+-]+@[A-Z0-9.-]+\.[A-Z]{2,}", re.IGNORECASE)


def sanitize_text(text: str, max_length: Optional[int] = None, strip_html: bool = True) -> str:
    """
    Sanitize text input.

    Strips HTML tags and normalizes whitespace. Entities are not escaped;
    rendering layers escape on output.

    Raises:
        ValidationError: If text exceeds max_length or still contains tag-like patterns
    """
    if not isinstance(text, str):
        raise ValidationError("Input must be a string")

    sanitized = text.strip()

    if max_length and len(sanitized) > max_length:
        raise ValidationError(f"Input exceeds maximum length of {max_length} characters")

    if strip_html:
        sanitized = re.sub(r'<[^>]*>', '', sanitized)

    if '<' in sanitized or '>' in sanitized:
        raise ValidationError("Input contains invalid HTML-like patterns")

    sanitized = re.sub(r'\s+', ' ', sanitized)

    return sanitized


def normalize_domain(domain: Optional[str]) -> str:
    """Trim and lowercase a tenant domain without validating it."""
    return str(domain or "").strip().lower()


def validate_domain(domain: Optional[str], field: str = "domain") -> str:
    """
    Normalize and validate a tenant domain.

    Accepts ``label.label...tld`` with a TLD of two or more letters and no
    leading hyphen.
    """
    normalized = normalize_domain(domain)
    if not normalized or len(normalized) > MAX_DOMAIN_LENGTH or not DOMAIN_RE.match(normalized):
        raise ValidationError("Provide a valid domain like example.com", field=field)
    return normalized


def require_domain(domain: Optional[str]) -> str:
    """Normalize a domain query parameter, rejecting empty values."""
    normalized = normalize_domain(domain)
    if not normalized:
        raise ValidationError("domain is required", field="domain")
    return normalized


def validate_email(email: Optional[str], field: str = "email") -> str:
    normalized = str(email or "").strip().lower()
    if not EMAIL_RE.match(normalized):
        raise ValidationError("Invalid email", field=field)
    return normalized


def validate_phone(phone: Optional[str]) -> Optional[str]:
    if phone is None or not str(phone).strip():
        return None
    phone = str(phone).strip()
    if not PHONE_RE.match(phone):
        raise ValidationError("Invalid phone number", field="phone")
    return phone


def parse_seat_limit(value) -> Optional[int]:
    """Parse an optional seat limit: ``None``/empty means unlimited."""
    if value is None or value == "":
        return None
    error = ValidationError("seatLimit must be a positive integer", field="seat_limit")
    if isinstance(value, bool):
        raise error
    if isinstance(value, float):
        if not value.is_integer():
            raise error
        value = int(value)
    try:
        number = int(str(value).strip())
    except ValueError:
        raise error
    if number < 1:
        raise error
    return number


def extract_emails(values: Iterable[str]) -> List[str]:
    """Pull lowercased, de-duplicated email addresses out of free text."""
    found: List[str] = []
    for value in values:
        for match in EMBEDDED_EMAIL_RE.findall(str(value or "")):
            address = match.lower()
            if address not in found:
                found.append(address)
    return found
