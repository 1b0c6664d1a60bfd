"""Consistency checks for conditional includes.

A mapping whose trigger directory is missing only earns a warning (Git simply
never activates it), while a missing profile file is an error: repositories
under that directory silently fall back to the global identity.
"""

from __future__ import annotations

import dataclasses
import os
import pathlib
import typing as t

from .document import expand_home

if t.TYPE_CHECKING:
    from .document import ProfileMapping
    from .types import MappingStatus, PathPredicate, StrPath


@dataclasses.dataclass(frozen=True)
class MappingCheck:
    """Existence checks for one mapping."""

    mapping: ProfileMapping
    dir_exists: bool
    profile_exists: bool

    @property
    def status(self) -> MappingStatus:
        if not self.profile_exists:
            return "error"
        if not self.dir_exists:
            return "warning"
        return "ok"

    @property
    def messages(self) -> list[str]:
        messages = []
        if not self.dir_exists:
            messages.append(f"Directory does not exist: {self.mapping.trigger_dir}")
        if not self.profile_exists:
            messages.append(f"Profile file missing: {self.mapping.profile_path}")
        return messages


@dataclasses.dataclass(frozen=True)
class ValidationReport:
    """Result of :func:`check_mappings`."""

    checks: tuple[MappingCheck, ...] = ()

    @property
    def ok(self) -> bool:
        """True when no mapping has an error; warnings are tolerated."""
        return not self.errors

    @property
    def warnings(self) -> list[MappingCheck]:
        return [check for check in self.checks if check.status == "warning"]

    @property
    def errors(self) -> list[MappingCheck]:
        return [check for check in self.checks if check.status == "error"]

    def summary(self) -> dict[str, int]:
        """Count checks by status.

        >>> ValidationReport().summary()
        {'total': 0, 'ok': 0, 'warning': 0, 'error': 0}
        """
        counts = {"total": len(self.checks), "ok": 0, "warning": 0, "error": 0}
        for check in self.checks:
            counts[check.status] += 1
        return counts


def check_mappings(
    mappings: t.Iterable[ProfileMapping],
    dir_exists: PathPredicate,
    file_exists: PathPredicate,
    home: str | pathlib.Path | None = None,
) -> ValidationReport:
    """Check trigger directory and profile file existence for each mapping.

    Both predicates receive ``~``-expanded paths, so they can be plain
    ``os.path`` functions or in-memory fakes.
    """
    return ValidationReport(
        checks=tuple(
            MappingCheck(
                mapping=mapping,
                dir_exists=dir_exists(mapping.expanded_trigger_dir(home)),
                profile_exists=file_exists(mapping.expanded_profile_path(home)),
            )
            for mapping in mappings
        ),
    )


def find_active_mapping(
    mappings: t.Iterable[ProfileMapping],
    cwd: StrPath,
    home: str | pathlib.Path | None = None,
) -> ProfileMapping | None:
    """Return the first mapping whose trigger directory contains ``cwd``.

    Matching is a prefix test on the expanded directory, so ``~/work/`` is
    active in ``~/work`` itself and anywhere below it.

    Examples
    --------
    >>> from gitlinker.document import IncludeIfSection
    >>> work = IncludeIfSection.create("~/work", "~/p/work").mapping()
    >>> find_active_mapping([work], "/home/u/work/api", home="/home/u").profile_path
    '~/p/work'
    >>> find_active_mapping([work], "/home/u/workshop", home="/home/u") is None
    True
    """
    current = os.path.normpath(expand_home(str(cwd), home)).rstrip("/") + "/"
    for mapping in mappings:
        trigger = mapping.expanded_trigger_dir(home).rstrip("/") + "/"
        if current.startswith(trigger):
            return mapping
    return None
