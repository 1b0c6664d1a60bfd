"""Typings for gitlinker.

Conditional include graph
-------------------------

The user's ``~/.gitconfig`` maps *trigger directories* to *profile* files::

    [includeIf "gitdir:~/repositories/work/"]
        path = ~/.config/git/profiles/work

    [includeIf "gitdir:~/repositories/personal/"]
        path = ~/.config/git/profiles/personal

In Python we model each block as an ``IncludeIfSection`` and project it into a
``ProfileMapping`` for reporting. Existence checks are never performed by the
model itself, callers inject ``PathPredicate`` callables instead.
"""

from __future__ import annotations

import pathlib
import typing as t
from typing import TypeAlias

from typing_extensions import NotRequired, TypedDict

StrPath: TypeAlias = t.Union[str, pathlib.Path]

PathPredicate: TypeAlias = t.Callable[[str], bool]
"""Callable answering "does this (already ``~``-expanded) path exist?"."""


class RawSettingsDict(TypedDict):
    """Settings file contents before pydantic validation."""

    gitconfig: NotRequired[str]
    profiles_dir: NotRequired[str]
    backup: NotRequired[bool]
    backup_suffix_format: NotRequired[str]
    fsync: NotRequired[bool]


MappingStatus = t.Literal["ok", "warning", "error"]
