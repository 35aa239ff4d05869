"""Tests for token, key and admin auth helpers."""
import re
from datetime import datetime, timedelta, timezone

import jwt
import pytest
from fastapi import HTTPException
from unittest.mock import Mock

from wellpulse.core import config
from wellpulse.core.security import (
    create_access_token,
    generate_challenge_token,
    generate_license_key,
    get_password_hash,
    to_base36,
    verify_admin_token,
    verify_password,
)

LICENSE_KEY_RE = re.compile(r"^csw-lic-[A-Z0-9]{4}-[A-Z0-9]{4}-[A-Z0-9]{4}-[A-Z0-9]{4}$")


@pytest.mark.unit
class TestChallengeToken:

    def test_base36(self):
        assert to_base36(0) == "0"
        assert to_base36(35) == "z"
        assert to_base36(36) == "10"

    def test_format(self):
        token = generate_challenge_token()
        assert token.startswith("gp-verify=")
        assert re.match(r"^gp-verify=[0-9a-z]+$", token)

    def test_ends_with_timestamp(self):
        now = datetime(2025, 6, 2, 9, 0, tzinfo=timezone.utc)
        token = generate_challenge_token(now)
        assert token.endswith(to_base36(int(now.timestamp() * 1000)))

    def test_unique(self):
        assert len({generate_challenge_token() for _ in range(50)}) == 50


@pytest.mark.unit
class TestLicenseKey:

    def test_format(self):
        assert LICENSE_KEY_RE.match(generate_license_key("acme.com", "lead@acme.com"))

    def test_random_per_call(self):
        keys = {generate_license_key("acme.com", "lead@acme.com") for _ in range(20)}
        assert len(keys) == 20


@pytest.mark.unit
class TestAdminAuth:

    def test_password_hash_roundtrip(self):
        password_hash = get_password_hash("correct horse")
        assert verify_password("correct horse", password_hash)
        assert not verify_password("wrong", password_hash)

    def test_valid_cookie(self):
        request = Mock()
        request.cookies = {"admin_token": create_access_token({"is_admin": True})}
        assert verify_admin_token(request)["is_admin"] is True

    def test_missing_cookie(self):
        request = Mock()
        request.cookies = {}
        with pytest.raises(HTTPException) as info:
            verify_admin_token(request)
        assert info.value.status_code == 401

    def test_not_admin(self):
        request = Mock()
        request.cookies = {"admin_token": create_access_token({"is_admin": False})}
        with pytest.raises(HTTPException) as info:
            verify_admin_token(request)
        assert info.value.status_code == 403

    def test_expired(self):
        request = Mock()
        request.cookies = {"admin_token": create_access_token({"is_admin": True}, timedelta(seconds=-5))}
        with pytest.raises(HTTPException) as info:
            verify_admin_token(request)
        assert info.value.detail == "Token expired"

    def test_wrong_key(self):
        token = jwt.encode({"is_admin": True}, "other-key", algorithm=config.settings.ALGORITHM)
        request = Mock()
        request.cookies = {"admin_token": token}
        with pytest.raises(HTTPException) as info:
            verify_admin_token(request)
        assert info.value.detail == "Invalid token"
