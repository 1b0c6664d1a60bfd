"""Tests for gitlinker utilities."""

from __future__ import annotations

import pathlib
import typing as t

from gitlinker.util import get_config_dir

if t.TYPE_CHECKING:
    import pytest


def test_gitlinker_configdir_env_var(
    tmp_path: pathlib.Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """Test retrieving config directory with GITLINKER_CONFIGDIR set."""
    monkeypatch.setenv("GITLINKER_CONFIGDIR", str(tmp_path))

    assert get_config_dir() == tmp_path


def test_gitlinker_configdir_xdg_config_dir(
    tmp_path: pathlib.Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """Test retrieving config directory with XDG_CONFIG_HOME set."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))

    assert get_config_dir() == tmp_path / "gitlinker"


def test_gitlinker_configdir_no_xdg(
    monkeypatch: pytest.MonkeyPatch,
    user_path: pathlib.Path,
) -> None:
    """Without XDG_CONFIG_HOME the directory lives under ``~/.config``."""
    monkeypatch.delenv("XDG_CONFIG_HOME")

    assert get_config_dir() == user_path / ".config" / "gitlinker"


def test_get_config_dir_does_not_create(
    tmp_path: pathlib.Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setenv("GITLINKER_CONFIGDIR", str(tmp_path / "absent"))

    assert not get_config_dir().exists()
