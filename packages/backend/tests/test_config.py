"""Settings tests: secret validation and cookie flags."""

import pytest

from wardrobe.config import Settings


def test_production_rejects_default_secrets():
    with pytest.raises(ValueError):
        Settings(environment="production")


def test_production_rejects_identical_secrets():
    with pytest.raises(ValueError):
        Settings(
            environment="production",
            access_token_secret="same-secret",
            refresh_token_secret="same-secret",
        )


def test_cookies_are_secure_outside_development():
    config = Settings(
        environment="production",
        access_token_secret="a" * 32,
        refresh_token_secret="b" * 32,
    )
    assert config.cookie_secure
    assert not Settings(environment="development").cookie_secure
