"""Tests for token issuance / verification, password hashing and settings validation."""

import time
import uuid

import pytest
from jose import jwt
from pydantic import ValidationError

from app.core.config import DEV_JWT_SECRET, Settings, settings
from app.core.exceptions import TokenExpiredError, TokenMalformedError
from app.core.security import hash_password, issue_token, verify_password, verify_token


def test_token_round_trip_returns_subject():
    user_id = uuid.uuid4()
    claims = verify_token(issue_token(user_id))
    assert claims.subject == user_id


def test_token_default_lifetime_is_one_hour():
    before = int(time.time())
    claims = verify_token(issue_token(uuid.uuid4()))
    assert before + 3600 <= claims.expires_at <= int(time.time()) + 3600


def test_token_with_explicit_secret_and_ttl():
    user_id = uuid.uuid4()
    token = issue_token(user_id, secret="another-secret", ttl=60)
    claims = verify_token(token, secret="another-secret")
    assert claims.subject == user_id
    assert claims.expires_at <= int(time.time()) + 60


def test_expired_token_is_reported_as_expired():
    token = issue_token(uuid.uuid4(), ttl=-30)
    with pytest.raises(TokenExpiredError):
        verify_token(token)


def test_wrong_secret_is_malformed():
    token = issue_token(uuid.uuid4(), secret="someone-elses-secret")
    with pytest.raises(TokenMalformedError):
        verify_token(token)


def test_garbage_token_is_malformed():
    with pytest.raises(TokenMalformedError):
        verify_token("not.a.jwt")


def test_token_without_exp_is_malformed():
    token = jwt.encode({"sub": str(uuid.uuid4())}, settings.JWT_SECRET, algorithm="HS256")
    with pytest.raises(TokenMalformedError):
        verify_token(token)


def test_token_with_non_uuid_subject_is_malformed():
    token = jwt.encode(
        {"sub": "admin1", "exp": int(time.time()) + 60},
        settings.JWT_SECRET,
        algorithm="HS256",
    )
    with pytest.raises(TokenMalformedError):
        verify_token(token)


def test_expiry_is_rechecked_after_decoding(monkeypatch):
    """Even if the JWT library skipped expiry validation, exp is enforced."""
    token = issue_token(uuid.uuid4(), ttl=-5)
    real_decode = jwt.decode

    def _lenient_decode(*args, **kwargs):
        kwargs["options"] = {"verify_exp": False}
        return real_decode(*args, **kwargs)

    monkeypatch.setattr("app.core.security.jwt.decode", _lenient_decode)
    with pytest.raises(TokenExpiredError):
        verify_token(token)


def test_password_hash_verifies():
    hashed = hash_password("s3cret-pass")
    assert hashed != "s3cret-pass"
    assert verify_password("s3cret-pass", hashed)
    assert not verify_password("wrong-pass", hashed)


# ── Settings ────────────────────────────────────────────────────────
def test_production_requires_jwt_secret():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, APP_ENV="production", JWT_SECRET=None)


def test_production_accepts_explicit_secret():
    cfg = Settings(_env_file=None, APP_ENV="production", JWT_SECRET="a-real-secret")
    assert cfg.is_production
    assert not cfg.seed_development_data
    assert cfg.JWT_SECRET == "a-real-secret"


def test_development_falls_back_to_dev_secret():
    cfg = Settings(_env_file=None, APP_ENV="development", JWT_SECRET=None)
    assert cfg.JWT_SECRET == DEV_JWT_SECRET
    assert cfg.seed_development_data


def test_environment_alias(monkeypatch):
    monkeypatch.delenv("APP_ENV", raising=False)
    monkeypatch.setenv("ENVIRONMENT", "prod")
    cfg = Settings(_env_file=None, JWT_SECRET="x")
    assert cfg.is_production


def test_allowed_origins_from_comma_list(monkeypatch):
    monkeypatch.setenv("ALLOWED_ORIGINS", "https://a.example, https://b.example")
    cfg = Settings(_env_file=None)
    assert cfg.ALLOWED_ORIGINS == ["https://a.example", "https://b.example"]


def test_bind_address_split():
    cfg = Settings(_env_file=None, BIND_ADDRESS="0.0.0.0:9000")
    assert cfg.bind_host_port == ("0.0.0.0", 9000)
