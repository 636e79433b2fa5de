"""Tests for settings.conf loading."""

import pytest

from config import load_settings_conf, SettingsError, DEFAULTS

def _write_settings(path, body):
    (path / 'settings.conf').write_text("[DEFAULT]\n" + body)

def test_missing_file_uses_defaults(tmp_path):
    settings = load_settings_conf(str(tmp_path))

    assert settings['db_url'] == DEFAULTS['db_url']
    assert settings['search_default_limit'] == 20
    assert settings['search_max_limit'] == 100
    assert settings['api_port'] == 3000
    assert settings['log_level'] == 'INFO'

def test_missing_secrets_are_generated(tmp_path):
    settings = load_settings_conf(str(tmp_path))

    assert settings['jwt_secret']
    assert settings['jwt_refresh_secret']
    assert settings['jwt_secret'] != settings['jwt_refresh_secret']

def test_file_values_override_defaults(tmp_path):
    _write_settings(tmp_path, (
        "db_url = postgresql://geode:pw@db:5432/geode\n"
        "jwt_secret = access%secret\n"
        "search_max_limit = 50\n"
        "log_level = debug\n"
    ))

    settings = load_settings_conf(str(tmp_path))

    assert settings['db_url'] == 'postgresql://geode:pw@db:5432/geode'
    assert settings['jwt_secret'] == 'access%secret'
    assert settings['search_max_limit'] == 50
    assert settings['log_level'] == 'DEBUG'

def test_settings_dir_from_environment(tmp_path, monkeypatch):
    _write_settings(tmp_path, "api_port = 8080\n")
    monkeypatch.setenv('GEODE_SETTINGS_DIR', str(tmp_path))

    assert load_settings_conf()['api_port'] == 8080

@pytest.mark.parametrize("body", [
    "api_port = http\n",
    "search_default_limit = 0\n",
    "access_token_expiry_minutes = -5\n",
    "search_default_limit = 200\nsearch_max_limit = 100\n",
])
def test_invalid_values(tmp_path, body):
    _write_settings(tmp_path, body)

    with pytest.raises(SettingsError) as exc_info:
        load_settings_conf(str(tmp_path))
    assert "Invalid values" in str(exc_info.value)

def test_error_message_lists_every_invalid_value(tmp_path):
    _write_settings(tmp_path, "api_port = http\nrefresh_token_expiry_days = never\n")

    with pytest.raises(SettingsError) as exc_info:
        load_settings_conf(str(tmp_path))

    message = str(exc_info.value)
    assert "api_port: 'http'" in message
    assert "refresh_token_expiry_days: 'never'" in message
    assert "Missing" not in message
