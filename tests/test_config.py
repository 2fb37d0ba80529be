import pytest
from proconnect.core.config import Settings


def _settings(**overrides):
    values = {"DATABASE_URL": "postgresql://user@db/proconnect", "SECRET_KEY": "x"}
    values.update(overrides)
    return Settings(**values)


def test_database_urls_use_asyncpg():
    settings = _settings(TEST_DATABASE_URL="postgresql://user@db/proconnect_test")

    assert settings.ASYNC_DATABASE_URL == "postgresql+asyncpg://user@db/proconnect"
    assert settings.ASYNC_TEST_DATABASE_URL == "postgresql+asyncpg://user@db/proconnect_test"


def test_test_database_defaults_to_in_memory():
    assert _settings(TEST_DATABASE_URL=None).ASYNC_TEST_DATABASE_URL is None


def test_cors_origins_split_from_string():
    settings = _settings(BACKEND_CORS_ORIGINS="http://a.test, http://b.test")

    assert settings.BACKEND_CORS_ORIGINS == ["http://a.test", "http://b.test"]


def test_token_lifetime_must_be_positive():
    with pytest.raises(ValueError):
        _settings(ACCESS_TOKEN_EXPIRE_MINUTES=0)
