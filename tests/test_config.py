"""Tests for settings parsing and validation."""

from datetime import timedelta

import pytest
from pydantic import ValidationError

from quotation_api.core.config import DEFAULT_JWT_SECRET, Settings, parse_duration
from quotation_api.core.security import TokenConfig


@pytest.mark.parametrize(
    "value,expected",
    [
        ("24h", timedelta(hours=24)),
        ("30m", timedelta(minutes=30)),
        ("7d", timedelta(days=7)),
        ("45s", timedelta(seconds=45)),
        ("3600", timedelta(seconds=3600)),
        (120, timedelta(seconds=120)),
    ],
)
def test_parse_duration(value, expected):
    assert parse_duration(value) == expected


@pytest.mark.parametrize("value", ["", "soon", "1w", "-5m"])
def test_parse_duration_rejects_garbage(value):
    with pytest.raises(ValueError):
        parse_duration(value)


def test_token_config_from_settings():
    s = Settings(JWT_SECRET="abc", JWT_EXPIRES_IN="2h")
    config = TokenConfig.from_settings(s)
    assert config.secret == "abc"
    assert config.algorithm == "HS256"
    assert config.expires_in == timedelta(hours=2)


def test_production_refuses_default_secret():
    with pytest.raises(ValidationError):
        Settings(APP_ENV="production", JWT_SECRET=DEFAULT_JWT_SECRET)


def test_production_accepts_custom_secret():
    s = Settings(APP_ENV="production", JWT_SECRET="a-real-secret")
    assert s.APP_ENV == "production"


@pytest.mark.parametrize("rounds", [3, 32])
def test_bcrypt_rounds_bounds(rounds):
    with pytest.raises(ValidationError):
        Settings(BCRYPT_ROUNDS=rounds)


def test_cors_origins_accepts_comma_string():
    s = Settings(CORS_ORIGINS="http://a.test, http://b.test")
    assert s.CORS_ORIGINS == ["http://a.test", "http://b.test"]


@pytest.mark.parametrize("algorithm", ["RS256", "none", "HS999"])
def test_jwt_algorithm_must_be_hmac(algorithm):
    with pytest.raises(ValidationError):
        Settings(JWT_ALGORITHM=algorithm)


def test_jwt_algorithm_accepts_hs512():
    assert Settings(JWT_ALGORITHM="HS512").JWT_ALGORITHM == "HS512"
