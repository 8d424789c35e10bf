"""
Token and password helper tests, plus the bearer-token gate.
"""

from datetime import datetime, timedelta, timezone

import pytest
from bson import ObjectId
from jose import jwt

from profilehub.core.auth import (
    InvalidTokenError, TokenExpiredError,
    create_access_token, decode_token, hash_password, verify_password,
)
from profilehub.core.config import get_settings


def test_hash_and_verify_password():
    hashed = hash_password("s3cret")

    assert hashed != "s3cret"
    assert verify_password("s3cret", hashed)
    assert not verify_password("wrong", hashed)


def test_verify_against_non_hash_is_false():
    assert not verify_password("s3cret", "plaintext-in-db")


def test_token_carries_id_and_name_and_expires_in_30_days():
    profile_id = str(ObjectId())

    token = create_access_token(profile_id, "ada")
    claims = decode_token(token)

    assert claims["id"] == profile_id
    assert claims["name"] == "ada"
    expires = datetime.fromtimestamp(claims["exp"], tz=timezone.utc)
    remaining = expires - datetime.now(timezone.utc)
    assert timedelta(days=29, hours=23) < remaining <= timedelta(days=30)


def test_expired_token():
    token = create_access_token(str(ObjectId()), "ada", expires_delta=timedelta(seconds=-10))

    with pytest.raises(TokenExpiredError):
        decode_token(token)


def test_token_signed_with_other_secret():
    settings = get_settings()
    token = jwt.encode(
        {"id": str(ObjectId()), "name": "ada", "exp": datetime.now(timezone.utc) + timedelta(days=1)},
        "someone-elses-secret",
        algorithm=settings.jwt_algorithm,
    )

    with pytest.raises(InvalidTokenError):
        decode_token(token)


def test_token_without_claims():
    settings = get_settings()
    token = jwt.encode(
        {"exp": datetime.now(timezone.utc) + timedelta(days=1)},
        settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
    )

    with pytest.raises(InvalidTokenError):
        decode_token(token)


class TestBearerGate:
    def test_expired_token_rejected(self, client, register, auth_header):
        profile, _ = register(name="ada")
        token = create_access_token(profile["_id"], "ada", expires_delta=timedelta(seconds=-10))

        response = client.get("/api/profiles/me", headers=auth_header(token))

        assert response.status_code == 401
        assert response.json()["error"] == "Token expired"

    def test_token_for_unknown_profile(self, client, auth_header):
        token = create_access_token(str(ObjectId()), "ghost")

        response = client.get("/api/profiles/me", headers=auth_header(token))

        assert response.status_code == 401
        assert response.json()["error"] == "Profile not found"

    def test_name_claim_must_match(self, client, register, auth_header):
        profile, _ = register(name="ada")
        token = create_access_token(profile["_id"], "not-ada")

        response = client.get("/api/profiles/me", headers=auth_header(token))

        assert response.status_code == 401

    def test_non_bearer_scheme(self, client, register):
        _, token = register(name="ada")

        response = client.get("/api/profiles/me", headers={"Authorization": f"Basic {token}"})

        assert response.status_code == 401
