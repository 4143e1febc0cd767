"""
Tests for the production configuration check.
"""

import pytest

from mooprompt_api.core.cors import DEV_ORIGINS
from shared.config.settings import Settings

SAFE = {
    "environment": "production",
    "debug": False,
    "jwt_secret": "x" * 48,
    "seed_admin_password": "a-long-unique-password",
    "allowed_origins": "https://pos.example.com",
}


def test_development_is_never_flagged():
    assert Settings(environment="development").validate_production_secrets() == []


def test_safe_production_configuration():
    assert Settings(**SAFE).validate_production_secrets() == []


@pytest.mark.parametrize(
    "override,fragment",
    [
        ({"jwt_secret": "dev-secret-change-me-in-production"}, "JWT_SECRET"),
        ({"jwt_secret": "short"}, "JWT_SECRET"),
        ({"debug": True}, "DEBUG"),
        ({"seed_on_startup": True, "seed_admin_password": "admin123"}, "SEED_ADMIN_PASSWORD"),
        ({"allowed_origins": ""}, "ALLOWED_ORIGINS"),
    ],
)
def test_unsafe_production_values(override, fragment):
    problems = Settings(**{**SAFE, **override}).validate_production_secrets()
    assert len(problems) == 1
    assert fragment in problems[0]


def test_seed_password_only_matters_when_seeding():
    settings = Settings(**{**SAFE, "seed_on_startup": False, "seed_admin_password": "admin123"})
    assert settings.validate_production_secrets() == []


def test_dev_origins_cover_both_web_apps():
    assert "http://localhost:3000" in DEV_ORIGINS
    assert "http://127.0.0.1:3001" in DEV_ORIGINS
