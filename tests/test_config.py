"""Tests for settings loading."""

from pathlib import Path

import pytest

from filebrowser import config
from filebrowser.config import Settings, get_settings


def test_defaults():
    settings = get_settings()

    assert settings.port == 3000
    assert settings.host == "127.0.0.1"
    assert settings.request_timeout == 30
    assert settings.max_upload_size == 100 * 1024 * 1024
    assert settings.rate_limit_window == 60.0
    assert settings.rate_limit_max_requests == 100
    assert settings.root_dir == (Path.cwd() / "files").resolve()
    assert settings.log_file == (Path.cwd() / "logs" / "app.log").resolve()


def test_explicit_yaml_file(tmp_path):
    config_file = tmp_path / "custom.yaml"
    config_file.write_text("port: 8080\nroot_dir: shared\nrate_limit_max_requests: 5\n")

    settings = get_settings(config_file=config_file)

    assert settings.port == 8080
    assert settings.rate_limit_max_requests == 5
    assert settings.root_dir == (Path.cwd() / "shared").resolve()


def test_default_location_is_picked_up():
    Path("filebrowser.yaml").write_text("host: 0.0.0.0\n")

    assert get_settings().host == "0.0.0.0"


def test_env_overrides_yaml(tmp_path, monkeypatch):
    config_file = tmp_path / "custom.yaml"
    config_file.write_text("port: 8080\n")
    monkeypatch.setenv("FILEBROWSER_PORT", "9090")

    assert get_settings(config_file=config_file).port == 9090


def test_init_arguments_override_yaml():
    Path("filebrowser.yaml").write_text("port: 8080\nlog_level: DEBUG\n")

    settings = Settings(port=4000)

    assert settings.port == 4000
    assert settings.log_level == "DEBUG"


def test_missing_explicit_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        get_settings(config_file=tmp_path / "nope.yaml")


def test_empty_yaml_file(tmp_path):
    config_file = tmp_path / "empty.yaml"
    config_file.write_text("")

    assert get_settings(config_file=config_file).port == 3000


def test_log_file_can_be_disabled():
    assert Settings(log_file=None).log_file is None


def test_explicit_file_is_remembered(tmp_path):
    config_file = tmp_path / "custom.yaml"
    config_file.write_text("port: 8080\n")

    get_settings(config_file=config_file)

    assert config._config_file == config_file
    assert Settings().port == 8080
