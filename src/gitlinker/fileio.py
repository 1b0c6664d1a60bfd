"""Filesystem boundary for gitlinker: reads, atomic writes and backups.

Writes never touch the target file until the new contents are fully on disk:
data goes to a temporary file in the same directory, is flushed and fsynced,
then renamed over the target with :func:`os.replace`. If anything fails
before the rename the original file is left exactly as it was.
"""

from __future__ import annotations

import contextlib
import datetime
import glob
import logging
import os
import pathlib
import tempfile
import typing as t

from ._internal.private_path import PrivatePath
from .document import expand_home

if t.TYPE_CHECKING:
    from .types import StrPath

log = logging.getLogger(__name__)

BACKUP_MARKER = ".backup."
DEFAULT_BACKUP_SUFFIX_FORMAT = "%Y%m%d_%H%M%S"


def read_file(path: StrPath) -> bytes | None:
    """Return the contents of ``path``, or ``None`` if it does not exist.

    Other :class:`OSError` subclasses (permissions, ``path`` being a
    directory) propagate.

    >>> read_file(tmp_path / "missing") is None
    True
    """
    try:
        with open(path, "rb") as f:
            return f.read()
    except FileNotFoundError:
        return None


def write_file_atomic(path: StrPath, data: bytes, fsync: bool = True) -> None:
    """Replace ``path`` with ``data`` in a single rename.

    The parent directory must exist. An existing file's permission bits are
    carried over to the replacement.

    >>> target = tmp_path / "gitconfig"
    >>> write_file_atomic(target, b"[user]\\n")
    >>> target.read_bytes()
    b'[user]\\n'
    """
    target = pathlib.Path(path)
    fd, tmp_name = tempfile.mkstemp(
        dir=target.parent,
        prefix=f".{target.name}.",
        suffix=".tmp",
    )
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
            f.flush()
            if fsync:
                os.fsync(f.fileno())
        try:
            mode = os.stat(target).st_mode & 0o7777
        except FileNotFoundError:
            mode = 0o644
        os.chmod(tmp_name, mode)
        os.replace(tmp_name, target)
    except BaseException:
        with contextlib.suppress(FileNotFoundError):
            os.remove(tmp_name)
        raise


def backup_path_for(
    path: StrPath,
    now: datetime.datetime | None = None,
    suffix_format: str = DEFAULT_BACKUP_SUFFIX_FORMAT,
) -> pathlib.Path:
    """Return the sibling name a backup of ``path`` taken at ``now`` would use.

    >>> import datetime
    >>> backup_path_for("/home/u/.gitconfig", datetime.datetime(2024, 5, 1, 9, 30))
    PosixPath('/home/u/.gitconfig.backup.20240501_093000')
    """
    target = pathlib.Path(path)
    stamp = (now or datetime.datetime.now()).strftime(suffix_format)
    return target.with_name(f"{target.name}{BACKUP_MARKER}{stamp}")


def create_backup(
    path: StrPath,
    data: bytes,
    now: datetime.datetime | None = None,
    suffix_format: str = DEFAULT_BACKUP_SUFFIX_FORMAT,
) -> pathlib.Path:
    """Persist ``data`` (the pre-change bytes of ``path``) beside it.

    Backups are created exclusively; when a backup with the same timestamp
    already exists a ``.1``, ``.2``, ... suffix is appended. Backups are
    never removed by gitlinker.

    Returns
    -------
    pathlib.Path
        Where the backup was written.
    """
    candidate = base = backup_path_for(path, now=now, suffix_format=suffix_format)
    counter = 0
    while True:
        try:
            with open(candidate, "xb") as f:
                f.write(data)
            break
        except FileExistsError:
            counter += 1
            candidate = base.with_name(f"{base.name}.{counter}")

    with contextlib.suppress(FileNotFoundError):
        os.chmod(candidate, os.stat(path).st_mode & 0o7777)
    log.info("Backed up %s to %s", PrivatePath(path), PrivatePath(candidate))
    return candidate


def find_backups(path: StrPath) -> list[pathlib.Path]:
    """Return existing backups of ``path``, oldest first.

    >>> find_backups(tmp_path / ".gitconfig")
    []
    """
    target = pathlib.Path(path)
    pattern = glob.escape(str(target)) + glob.escape(BACKUP_MARKER) + "*"
    backups = [pathlib.Path(p) for p in glob.glob(pattern)]
    return sorted(backups, key=lambda p: (p.stat().st_mtime, p.name))


def path_exists(path: str) -> bool:
    return os.path.exists(path)


def file_exists(path: str) -> bool:
    return os.path.isfile(path)


def dir_exists(path: str) -> bool:
    """Return whether ``path`` is a directory.

    ``gitdir:`` patterns may contain globs (``~/work/**``); such a pattern
    counts as existing when any directory matches it.
    """
    if glob.has_magic(path):
        return any(os.path.isdir(p) for p in glob.iglob(path, recursive=True))
    return os.path.isdir(path)


__all__ = [
    "backup_path_for",
    "create_backup",
    "dir_exists",
    "expand_home",
    "file_exists",
    "find_backups",
    "path_exists",
    "read_file",
    "write_file_atomic",
]
