"""Profile fragments: the files ``includeIf ... path =`` points at.

A profile is rendered from a template holding ``{{USER_NAME}}`` and
``{{USER_EMAIL}}`` placeholders, e.g.::

    [user]
        name = {{USER_NAME}}
        email = {{USER_EMAIL}}
"""

from __future__ import annotations

import datetime
import logging
import os
import pathlib
import typing as t

from . import fileio
from ._internal.private_path import PrivatePath
from .document import expand_home

if t.TYPE_CHECKING:
    from .document import ProfileMapping
    from .types import StrPath

log = logging.getLogger(__name__)

USER_NAME_PLACEHOLDER = "{{USER_NAME}}"
USER_EMAIL_PLACEHOLDER = "{{USER_EMAIL}}"


def render_profile_template(template: str, user_name: str, user_email: str) -> str:
    """Substitute the identity placeholders in ``template``.

    Values are inserted literally, so names containing ``/``, ``&`` or
    backslashes come through untouched.

    >>> render_profile_template(
    ...     "name = {{USER_NAME}}\\nemail = {{USER_EMAIL}}\\n",
    ...     "Ada / Work",
    ...     "ada@example.com",
    ... )
    'name = Ada / Work\\nemail = ada@example.com\\n'
    """
    return template.replace(USER_NAME_PLACEHOLDER, user_name).replace(
        USER_EMAIL_PLACEHOLDER,
        user_email,
    )


def write_profile(
    profile_path: StrPath,
    content: str,
    *,
    backup: bool = True,
    fsync: bool = True,
    now: datetime.datetime | None = None,
    suffix_format: str = fileio.DEFAULT_BACKUP_SUFFIX_FORMAT,
) -> pathlib.Path | None:
    """Write a profile fragment, creating its directory if needed.

    An existing file with different contents is backed up first.

    Returns
    -------
    pathlib.Path | None
        The backup that was written, if any.
    """
    path = pathlib.Path(profile_path).expanduser()
    path.parent.mkdir(parents=True, exist_ok=True)

    data = content.encode("utf-8")
    previous = fileio.read_file(path)
    if previous == data:
        log.debug("Profile %s unchanged", PrivatePath(path))
        return None

    backup_path = None
    if previous is not None and backup:
        backup_path = fileio.create_backup(
            path,
            previous,
            now=now,
            suffix_format=suffix_format,
        )
    fileio.write_file_atomic(path, data, fsync=fsync)
    log.info("Wrote profile %s", PrivatePath(path))
    return backup_path


def install_profile(
    template_path: StrPath,
    profile_path: StrPath,
    user_name: str,
    user_email: str,
    **kwargs: t.Any,
) -> pathlib.Path | None:
    """Render ``template_path`` for an identity and write it to ``profile_path``."""
    template = pathlib.Path(template_path).expanduser().read_text(encoding="utf-8")
    return write_profile(
        profile_path,
        render_profile_template(template, user_name, user_email),
        **kwargs,
    )


class ProfileEntry(t.NamedTuple):
    """A profile file and the includes that point at it."""

    path: pathlib.Path
    mappings: list[ProfileMapping]

    @property
    def linked(self) -> bool:
        return bool(self.mappings)


def _is_profile_file(path: pathlib.Path) -> bool:
    # Hidden names cover in-flight temporary files from write_file_atomic.
    return (
        path.is_file()
        and not path.name.startswith(".")
        and fileio.BACKUP_MARKER not in path.name
    )


def list_profiles(
    profiles_dir: StrPath,
    mappings: t.Iterable[ProfileMapping] = (),
    home: str | pathlib.Path | None = None,
) -> list[ProfileEntry]:
    """Return the profile files in ``profiles_dir``, sorted by name.

    Each entry carries the mappings whose ``path`` resolves to that file, so
    profiles no include activates show up with an empty list. Backups and
    hidden files are skipped; a missing directory yields no profiles.

    >>> (tmp_path / "work").write_text("[user]\\n", encoding="utf-8")
    7
    >>> [(p.path.name, p.linked) for p in list_profiles(tmp_path)]
    [('work', False)]
    """
    directory = pathlib.Path(expand_home(str(profiles_dir), home))
    if not directory.is_dir():
        log.debug("No profiles directory at %s", PrivatePath(directory))
        return []

    mappings = list(mappings)
    entries = []
    for path in sorted(directory.iterdir()):
        if not _is_profile_file(path):
            continue
        target = os.path.normpath(path)
        entries.append(
            ProfileEntry(
                path,
                [
                    m
                    for m in mappings
                    if os.path.normpath(m.expanded_profile_path(home)) == target
                ],
            ),
        )
    return entries
