"""Security and token utilities."""
import base64
import hashlib
import random
import re
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

import argon2
import jwt
from fastapi import HTTPException, Request

from wellpulse.core import config
from wellpulse.core.constants import (
    CHALLENGE_TOKEN_PREFIX,
    LICENSE_KEY_GROUP_LENGTH,
    LICENSE_KEY_GROUPS,
    LICENSE_KEY_PREFIX,
)

ph = argon2.PasswordHasher(
    time_cost=2,
    memory_cost=65536,
    parallelism=1,
    hash_len=32,
    salt_len=16
)

BASE36_ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyz"


def to_base36(number: int) -> str:
    if number < 0:
        raise ValueError("base36 encoding expects a non-negative integer")
    if number == 0:
        return "0"
    digits = []
    while number:
        number, remainder = divmod(number, 36)
        digits.append(BASE36_ALPHABET[remainder])
    return "".join(reversed(digits))


def generate_challenge_token(now: Optional[datetime] = None) -> str:
    """Generate a DNS TXT challenge value such as ``gp-verify=k3j9x0q1lmv2a8c``.

    The value proves possession of the zone, it is not a secret: a random
    base-36 fragment is followed by the base-36 millisecond timestamp.
    """
    now = now or datetime.now(timezone.utc)
    fragment = to_base36(random.getrandbits(53))
    stamp = to_base36(int(now.timestamp() * 1000))
    return f"{CHALLENGE_TOKEN_PREFIX}{fragment}{stamp}"


def generate_license_key(domain: str, email: str) -> str:
    """Generate a license key like ``csw-lic-ABCD-1234-EFGH-5678``.

    The format is fixed, the value is not: fresh random bytes are mixed into
    the digest, so uniqueness is left to the ``license_key`` column.
    """
    nonce = secrets.token_hex(8)
    digest = hashlib.sha256(f"{domain}:{email}:{nonce}".encode()).digest()
    seed = base64.urlsafe_b64encode(digest).decode().rstrip("=")

    def take(text: str, length: int) -> str:
        return re.sub(r"[^A-Za-z0-9]", "", text).upper()[:length]

    groups = [
        take(seed[index * LICENSE_KEY_GROUP_LENGTH:], LICENSE_KEY_GROUP_LENGTH)
        for index in range(LICENSE_KEY_GROUPS)
    ]
    return f"{LICENSE_KEY_PREFIX}-{'-'.join(groups)}"


def get_password_hash(password: str) -> str:
    """Hash a password using Argon2."""
    return ph.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a password against its Argon2 hash."""
    try:
        ph.verify(password_hash, password)
        return True
    except argon2.exceptions.VerifyMismatchError:
        return False


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create a JWT access token."""
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=config.settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, config.settings.SECRET_KEY, algorithm=config.settings.ALGORITHM)


def verify_admin_token(request: Request) -> dict:
    """Verify JWT token from cookie and return payload."""
    token = request.cookies.get("admin_token")

    if not token:
        raise HTTPException(status_code=401, detail="Not authenticated")

    try:
        payload = jwt.decode(token, config.settings.SECRET_KEY, algorithms=[config.settings.ALGORITHM])
        if not payload.get("is_admin"):
            raise HTTPException(status_code=403, detail="Not authorized")
        return payload
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=401, detail="Token expired")
    except jwt.PyJWTError:
        raise HTTPException(status_code=401, detail="Invalid token")


def verify_admin_password(password: str) -> bool:
    """Verify the super-admin password.

    ADMIN_PASSWORD may be an Argon2 hash (recommended, see hash_password.py)
    or plaintext for local development.
    """
    stored_password = config.settings.ADMIN_PASSWORD

    if stored_password.startswith("$argon2"):
        return verify_password(password, stored_password)
    return secrets.compare_digest(password, stored_password)
