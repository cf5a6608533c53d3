"""Shared fixtures for filebrowser tests."""

import os

import pytest
from fastapi.testclient import TestClient

from filebrowser import config
from filebrowser.api.app import create_app
from filebrowser.config import Settings
from filebrowser.filesystem.client import FileTreeService


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep stray config files, .env and FILEBROWSER_* variables out of tests."""
    workdir = tmp_path / "cwd"
    workdir.mkdir()
    monkeypatch.chdir(workdir)
    monkeypatch.setattr(config, "_config_file", None)
    monkeypatch.setattr(config, "DEFAULT_CONFIG_PATHS", [workdir / "filebrowser.yaml"])
    for name in list(os.environ):
        if name.startswith("FILEBROWSER_"):
            monkeypatch.delenv(name)


@pytest.fixture
def root(tmp_path):
    root_dir = tmp_path / "files"
    root_dir.mkdir()
    return root_dir


@pytest.fixture
def service(root):
    return FileTreeService(root)


@pytest.fixture
def settings(root):
    return Settings(root_dir=root, log_file=None)


@pytest.fixture
def client(settings):
    return TestClient(create_app(settings))
