"""Tests for gitlinker's file reads, atomic writes and backups."""

from __future__ import annotations

import datetime
import os
import stat
import typing as t

import pytest

from gitlinker import fileio

if t.TYPE_CHECKING:
    import pathlib

NOW = datetime.datetime(2024, 5, 1, 9, 30, 0)


def test_read_file_missing_returns_none(tmp_path: pathlib.Path) -> None:
    assert fileio.read_file(tmp_path / "missing") is None


def test_read_file_directory_propagates(tmp_path: pathlib.Path) -> None:
    with pytest.raises(OSError):
        fileio.read_file(tmp_path)


def test_write_creates_and_replaces(tmp_path: pathlib.Path) -> None:
    config_dir = tmp_path / "cfg"
    config_dir.mkdir()
    target = config_dir / ".gitconfig"

    fileio.write_file_atomic(target, b"one\n", fsync=False)
    assert target.read_bytes() == b"one\n"

    fileio.write_file_atomic(target, b"two\n")
    assert target.read_bytes() == b"two\n"
    # no temporary files are left behind
    assert sorted(p.name for p in config_dir.iterdir()) == [".gitconfig"]


def test_write_keeps_permissions(tmp_path: pathlib.Path) -> None:
    target = tmp_path / ".gitconfig"
    target.write_bytes(b"old\n")
    os.chmod(target, 0o600)

    fileio.write_file_atomic(target, b"new\n")

    assert stat.S_IMODE(os.stat(target).st_mode) == 0o600


def test_failed_replace_leaves_original(
    tmp_path: pathlib.Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    config_dir = tmp_path / "cfg"
    config_dir.mkdir()
    target = config_dir / ".gitconfig"
    target.write_bytes(b"original\n")

    def fail_replace(src: t.Any, dst: t.Any) -> None:
        raise OSError("disk full")

    monkeypatch.setattr(fileio.os, "replace", fail_replace)

    with pytest.raises(OSError, match="disk full"):
        fileio.write_file_atomic(target, b"replacement\n")

    assert target.read_bytes() == b"original\n"
    assert [p.name for p in config_dir.iterdir()] == [".gitconfig"]


def test_write_into_missing_directory_fails(tmp_path: pathlib.Path) -> None:
    with pytest.raises(FileNotFoundError):
        fileio.write_file_atomic(tmp_path / "nope" / ".gitconfig", b"x")


def test_backup_path_for_custom_format() -> None:
    path = fileio.backup_path_for("/home/u/.gitconfig", NOW, suffix_format="%Y-%m-%d")

    assert str(path) == "/home/u/.gitconfig.backup.2024-05-01"


def test_create_backup(tmp_path: pathlib.Path) -> None:
    target = tmp_path / ".gitconfig"
    target.write_bytes(b"current\n")

    backup = fileio.create_backup(target, b"previous\n", now=NOW)

    assert backup == tmp_path / ".gitconfig.backup.20240501_093000"
    assert backup.read_bytes() == b"previous\n"
    assert target.read_bytes() == b"current\n"


def test_create_backup_never_overwrites(tmp_path: pathlib.Path) -> None:
    target = tmp_path / ".gitconfig"
    target.write_bytes(b"x\n")

    first = fileio.create_backup(target, b"first\n", now=NOW)
    second = fileio.create_backup(target, b"second\n", now=NOW)
    third = fileio.create_backup(target, b"third\n", now=NOW)

    assert first.name == ".gitconfig.backup.20240501_093000"
    assert second.name == ".gitconfig.backup.20240501_093000.1"
    assert third.name == ".gitconfig.backup.20240501_093000.2"
    assert first.read_bytes() == b"first\n"
    assert second.read_bytes() == b"second\n"


def test_find_backups(tmp_path: pathlib.Path) -> None:
    target = tmp_path / ".gitconfig"
    target.write_bytes(b"x\n")
    (tmp_path / ".gitconfig.other").write_bytes(b"")

    older = fileio.create_backup(target, b"a\n", now=NOW)
    newer = fileio.create_backup(
        target,
        b"b\n",
        now=NOW + datetime.timedelta(hours=1),
    )
    os.utime(older, (1_000_000, 1_000_000))
    os.utime(newer, (2_000_000, 2_000_000))

    assert fileio.find_backups(target) == [older, newer]


def test_dir_exists(tmp_path: pathlib.Path) -> None:
    (tmp_path / "work" / "api").mkdir(parents=True)
    (tmp_path / "file").write_text("", encoding="utf-8")

    assert fileio.dir_exists(str(tmp_path / "work"))
    assert not fileio.dir_exists(str(tmp_path / "gone"))
    assert not fileio.dir_exists(str(tmp_path / "file"))


def test_dir_exists_glob_pattern(tmp_path: pathlib.Path) -> None:
    (tmp_path / "clients" / "acme").mkdir(parents=True)

    assert fileio.dir_exists(str(tmp_path / "clients" / "*"))
    assert fileio.dir_exists(str(tmp_path / "**" / "acme"))
    assert not fileio.dir_exists(str(tmp_path / "vendors" / "*"))


def test_file_exists(tmp_path: pathlib.Path) -> None:
    profile = tmp_path / "work"
    profile.write_text("[user]\n", encoding="utf-8")

    assert fileio.file_exists(str(profile))
    assert not fileio.file_exists(str(tmp_path))
    assert fileio.path_exists(str(tmp_path))
