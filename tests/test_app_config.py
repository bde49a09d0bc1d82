import pytest

from utils import app_config
from utils.constants import DEFAULT_API_URL, DEFAULT_TIMEOUT


@pytest.fixture(autouse=True)
def config_home(tmp_path, monkeypatch):
    monkeypatch.setattr(app_config, "CONFIG_DIR", tmp_path / "cfg")
    monkeypatch.setattr(app_config, "CONFIG_FILE", tmp_path / "cfg" / "config.json")
    for var in (app_config.ENV_API_URL, app_config.ENV_TIMEOUT, app_config.ENV_LOG_LEVEL):
        monkeypatch.delenv(var, raising=False)
    return tmp_path / "cfg"


def test_defaults_when_nothing_configured():
    assert app_config.load_config() == {}
    assert app_config.get_api_base_url() == DEFAULT_API_URL
    assert app_config.get_timeout() == DEFAULT_TIMEOUT
    assert app_config.get_log_level() == "INFO"
    assert app_config.get_token() is None


def test_settings_round_trip_and_none_removes():
    app_config.set_setting("date_format", "DD/MM/YYYY")
    app_config.set_token("tok")
    assert app_config.get_setting("date_format") == "DD/MM/YYYY"
    assert app_config.get_token() == "tok"

    app_config.set_token(None)
    assert "token" not in app_config.load_config()
    assert app_config.get_setting("date_format") == "DD/MM/YYYY"


def test_corrupt_file_reads_as_empty(config_home):
    config_home.mkdir()
    (config_home / "config.json").write_text("{not json", encoding="utf-8")
    assert app_config.load_config() == {}
    assert app_config.get_setting("missing", "fallback") == "fallback"


def test_environment_overrides_file(monkeypatch):
    app_config.set_setting("api_base_url", "http://from-file:1/")
    assert app_config.get_api_base_url() == "http://from-file:1"

    monkeypatch.setenv(app_config.ENV_API_URL, "https://from-env/")
    monkeypatch.setenv(app_config.ENV_TIMEOUT, "2.5")
    monkeypatch.setenv(app_config.ENV_LOG_LEVEL, "debug")
    assert app_config.get_api_base_url() == "https://from-env"
    assert app_config.get_timeout() == 2.5
    assert app_config.get_log_level() == "DEBUG"


def test_bad_timeout_falls_back_to_default(monkeypatch):
    monkeypatch.setenv(app_config.ENV_TIMEOUT, "soon")
    assert app_config.get_timeout() == DEFAULT_TIMEOUT
