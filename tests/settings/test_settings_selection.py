import pytest

from config import get_settings_module, load_settings


@pytest.mark.parametrize(
    "env, expected",
    [
        ("prod", "config.production"),
        ("Production", "config.production"),
        ("test", "config.testing"),
        ("dev", "config.development"),
        ("staging", "config.development"),
    ],
)
def test_settings_module_aliases(env, expected):
    assert get_settings_module(env) == expected


def test_app_env_is_the_default(monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")

    assert get_settings_module() == "config.testing"


def test_testing_settings_use_separate_database():
    settings = load_settings("config.testing")

    assert settings.TESTING is True
    assert settings.DB_CONFIG["database"] == "gv_classroom_test"
    assert settings.REHOMOLOGATION_POLICY == "overwrite"
