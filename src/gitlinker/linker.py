"""Link Git identity profiles into a config file via ``includeIf``.

The module-level functions are pure: they take a :class:`ConfigDocument` and
return a new one, never touching the filesystem. :class:`ConfigLinker` binds
them to a file on disk (load, mutate, back up, write atomically).

Concurrent invocations against the same file are not coordinated; the last
writer wins.
"""

from __future__ import annotations

import dataclasses
import datetime
import logging
import os
import pathlib
import typing as t

from . import exc, fileio
from ._internal.private_path import PrivatePath
from .document import (
    AddResult,
    ConfigDocument,
    ConfigLine,
    IncludeIfSection,
    ProfileMapping,
    RemoveResult,
    normalize_trigger_dir,
)
from .parser import parse, serialize
from .profiles import ProfileEntry, list_profiles
from .settings import LinkerSettings, load_settings
from .validator import ValidationReport, check_mappings, find_active_mapping

if t.TYPE_CHECKING:
    from .document import Section
    from .types import PathPredicate, StrPath

log = logging.getLogger(__name__)

DEFAULT_GITCONFIG = "~/.gitconfig"
DEFAULT_PROFILES_DIR = "~/.config/git/profiles"


def _ensure_terminated(line: ConfigLine, newline: str) -> ConfigLine:
    if line.terminated:
        return line
    return dataclasses.replace(line, raw=line.raw + newline)


def _replace_last_line(
    document: ConfigDocument,
    transform: t.Callable[[ConfigLine], ConfigLine | None],
) -> ConfigDocument:
    """Apply ``transform`` to the document's final line (``None`` drops it)."""
    if document.sections:
        section = document.sections[-1]
        sections = list(document.sections)
        sections[-1] = _transform_section_tail(section, transform)
        return dataclasses.replace(document, sections=tuple(sections))
    if document.preamble:
        return dataclasses.replace(
            document,
            preamble=_transform_tail(document.preamble, transform),
        )
    return document


def _transform_tail(
    lines: tuple[ConfigLine, ...],
    transform: t.Callable[[ConfigLine], ConfigLine | None],
) -> tuple[ConfigLine, ...]:
    replacement = transform(lines[-1])
    return lines[:-1] if replacement is None else (*lines[:-1], replacement)


def _transform_section_tail(
    section: Section,
    transform: t.Callable[[ConfigLine], ConfigLine | None],
) -> Section:
    if section.lines:
        return dataclasses.replace(
            section,
            lines=_transform_tail(section.lines, transform),
        )
    # A bare header with nothing under it; the header is never dropped.
    header = transform(section.header)
    return dataclasses.replace(section, header=header or section.header)


def add_include(
    document: ConfigDocument,
    trigger_dir: str,
    profile_path: str,
) -> AddResult:
    """Map ``trigger_dir`` to ``profile_path``, updating an existing mapping.

    An existing include whose directory matches ``trigger_dir`` (compared
    literally after normalising the trailing ``/``) gets its ``path`` line
    rewritten where it stands. Otherwise a canonical section is appended,
    separated from the previous content by one blank line.

    Examples
    --------
    >>> from gitlinker.parser import parse, serialize
    >>> doc = parse(b"[user]\\n    name = Default\\n")
    >>> result = add_include(doc, "~/work", "~/.config/git/profiles/work")
    >>> result.updated
    False
    >>> print(serialize(result.document).decode(), end="")
    [user]
        name = Default
    <BLANKLINE>
    [includeIf "gitdir:~/work/"]
        path = ~/.config/git/profiles/work
    >>> add_include(result.document, "~/work/", "~/other").updated
    True
    """
    trigger = normalize_trigger_dir(trigger_dir)

    for index, section in enumerate(document.sections):
        if isinstance(section, IncludeIfSection) and section.trigger_dir == trigger:
            sections = list(document.sections)
            sections[index] = section.with_path(profile_path)
            log.debug("updated include for %s -> %s", trigger, profile_path)
            return AddResult(
                dataclasses.replace(document, sections=tuple(sections)),
                updated=True,
            )

    newline = document.newline
    if not document.is_empty():
        document = _replace_last_line(
            document,
            lambda line: _ensure_terminated(line, newline),
        )
        last_line = document.last_line()
        if last_line is not None and not last_line.blank:
            document = _append_to_tail(document, ConfigLine(newline))

    section = IncludeIfSection.create(trigger, profile_path, newline=newline)
    log.debug("appended include for %s -> %s", trigger, profile_path)
    return AddResult(
        dataclasses.replace(document, sections=(*document.sections, section)),
        updated=False,
    )


def _append_to_tail(document: ConfigDocument, line: ConfigLine) -> ConfigDocument:
    if document.sections:
        sections = list(document.sections)
        last = sections[-1]
        sections[-1] = dataclasses.replace(last, lines=(*last.lines, line))
        return dataclasses.replace(document, sections=tuple(sections))
    return dataclasses.replace(document, preamble=(*document.preamble, line))


def _trailing_blank_count(lines: tuple[ConfigLine, ...]) -> int:
    count = 0
    for line in reversed(lines):
        if not line.blank:
            break
        count += 1
    return count


def remove_includes_for_missing_dirs(
    document: ConfigDocument,
    dir_exists: PathPredicate,
    home: str | pathlib.Path | None = None,
) -> RemoveResult:
    """Drop includes whose trigger directory no longer exists.

    ``dir_exists`` receives the ``~``-expanded directory. Each removed section
    takes exactly one blank separator line with it: its own trailing blank
    line if it has one, otherwise the blank line just before it. A missing
    *profile* file is never a reason to remove anything.

    Examples
    --------
    >>> from gitlinker.parser import parse, serialize
    >>> doc = parse(
    ...     b'[includeIf "gitdir:/gone/"]\\n    path = a\\n\\n'
    ...     b'[includeIf "gitdir:/here/"]\\n    path = b\\n'
    ... )
    >>> result = remove_includes_for_missing_dirs(doc, lambda d: d == "/here")
    >>> result.removed_count
    1
    >>> serialize(result.document)
    b'[includeIf "gitdir:/here/"]\\n    path = b\\n'
    """
    preamble = document.preamble
    kept: list[Section] = []
    removed: list[ProfileMapping] = []

    for section in document.sections:
        if not isinstance(section, IncludeIfSection):
            kept.append(section)
            continue
        expanded = section.expanded_dir(home)
        if dir_exists(expanded):
            kept.append(section)
            continue

        log.warning(
            "Removing include for missing directory %s (profile %s)",
            section.directory,
            section.path,
        )
        removed.append(section.mapping())

        trailing = _trailing_blank_count(section.lines)
        if trailing:
            # Keep any extra trailing blanks beyond the one separator.
            leftover = section.lines[len(section.lines) - trailing + 1 :]
            if leftover:
                if kept:
                    kept[-1] = dataclasses.replace(
                        kept[-1],
                        lines=(*kept[-1].lines, *leftover),
                    )
                else:
                    preamble = (*preamble, *leftover)
            continue

        if kept:
            if _trailing_blank_count(kept[-1].lines):
                kept[-1] = dataclasses.replace(kept[-1], lines=kept[-1].lines[:-1])
        elif preamble and preamble[-1].blank:
            preamble = preamble[:-1]

    return RemoveResult(
        dataclasses.replace(document, sections=tuple(kept), preamble=preamble),
        removed_count=len(removed),
        removed=removed,
    )


def list_mappings(document: ConfigDocument) -> list[ProfileMapping]:
    """Return every ``gitdir:`` mapping in document order. Performs no I/O."""
    return [section.mapping() for section in document.includes]


class SaveResult(t.NamedTuple):
    """What :meth:`ConfigLinker.save` did."""

    path: pathlib.Path
    backup_path: pathlib.Path | None
    changed: bool


class LinkResult(t.NamedTuple):
    mapping: ProfileMapping
    updated: bool
    save: SaveResult


class CleanResult(t.NamedTuple):
    removed: list[ProfileMapping]
    save: SaveResult | None


class ConfigLinker:
    """Read-modify-write access to the ``includeIf`` blocks of a config file.

    Parameters
    ----------
    path : str | pathlib.Path, optional
        Config file to manage, ``~`` is expanded. Defaults to ``~/.gitconfig``.
    backup : bool
        Save the previous bytes beside the file before changing it.
    fsync : bool
        fsync the temporary file before renaming it into place.
    backup_suffix_format : str
        :func:`~datetime.datetime.strftime` format for backup suffixes.
    home : str | pathlib.Path, optional
        Home directory used to expand ``~`` inside includes. Defaults to the
        current user's.
    profiles_dir : str | pathlib.Path, optional
        Where profile fragments live. Defaults to ``~/.config/git/profiles``.
    """

    def __init__(
        self,
        path: StrPath | None = None,
        *,
        backup: bool = True,
        fsync: bool = True,
        backup_suffix_format: str = fileio.DEFAULT_BACKUP_SUFFIX_FORMAT,
        home: str | pathlib.Path | None = None,
        profiles_dir: StrPath | None = None,
    ) -> None:
        self.path = pathlib.Path(os.path.expanduser(str(path or DEFAULT_GITCONFIG)))
        self.backup = backup
        self.fsync = fsync
        self.backup_suffix_format = backup_suffix_format
        self.home = home
        self.profiles_dir = profiles_dir or DEFAULT_PROFILES_DIR

    @classmethod
    def from_settings(cls, settings: LinkerSettings | None = None) -> ConfigLinker:
        """Create a linker for the gitconfig named in user settings."""
        if settings is None:
            settings = load_settings()
        return cls(
            settings.gitconfig_path,
            backup=settings.backup,
            fsync=settings.fsync,
            backup_suffix_format=settings.backup_suffix_format,
            profiles_dir=settings.profiles_path,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({str(PrivatePath(self.path))!r})"

    def load(self) -> ConfigDocument:
        """Parse the config file; a missing file is an empty document."""
        data = fileio.read_file(self.path)
        if data is None:
            log.debug("%s does not exist yet", PrivatePath(self.path))
        try:
            return parse(data)
        except (exc.MalformedIncludeError, exc.ConfigDecodeError) as e:
            e.path = self.path
            log.error("Cannot parse %s: %s", PrivatePath(self.path), e.message)
            raise

    def save(
        self,
        document: ConfigDocument,
        now: datetime.datetime | None = None,
    ) -> SaveResult:
        """Write ``document`` back to disk if its bytes differ from the file.

        The parent directory must already exist.
        """
        new_data = serialize(document)
        previous = fileio.read_file(self.path)
        if previous == new_data:
            log.debug("%s unchanged, not writing", PrivatePath(self.path))
            return SaveResult(self.path, None, changed=False)

        backup_path = None
        if previous is not None and self.backup:
            backup_path = fileio.create_backup(
                self.path,
                previous,
                now=now,
                suffix_format=self.backup_suffix_format,
            )
        try:
            fileio.write_file_atomic(self.path, new_data, fsync=self.fsync)
        except OSError:
            if backup_path is not None:
                log.error(
                    "Failed to write %s; previous contents kept at %s",
                    PrivatePath(self.path),
                    PrivatePath(backup_path),
                )
            raise
        log.info("Wrote %s", PrivatePath(self.path))
        return SaveResult(self.path, backup_path, changed=True)

    def mappings(self) -> list[ProfileMapping]:
        return list_mappings(self.load())

    def link(self, trigger_dir: str, profile_path: str) -> LinkResult:
        """Add or update the include for ``trigger_dir`` and save."""
        result = add_include(self.load(), trigger_dir, profile_path)
        saved = self.save(result.document)
        trigger = normalize_trigger_dir(trigger_dir)
        mapping = next(
            m for m in list_mappings(result.document) if m.trigger_dir == trigger
        )
        if result.updated:
            log.info("Updated include for %s -> %s", trigger, profile_path)
        else:
            log.info("Added include for %s -> %s", trigger, profile_path)
        return LinkResult(mapping, result.updated, saved)

    def clean(self, dir_exists: PathPredicate = fileio.dir_exists) -> CleanResult:
        """Remove includes whose directory is gone; saves only if any were."""
        result = remove_includes_for_missing_dirs(
            self.load(),
            dir_exists,
            home=self.home,
        )
        if not result.removed_count:
            log.info("No unused includes found in %s", PrivatePath(self.path))
            return CleanResult([], None)
        saved = self.save(result.document)
        log.info(
            "Removed %d unused include%s from %s",
            result.removed_count,
            "" if result.removed_count == 1 else "s",
            PrivatePath(self.path),
        )
        return CleanResult(result.removed, saved)

    def check(
        self,
        dir_exists: PathPredicate = fileio.dir_exists,
        file_exists: PathPredicate = fileio.file_exists,
    ) -> ValidationReport:
        """Report directory and profile-file existence for every mapping."""
        return check_mappings(
            self.mappings(),
            dir_exists=dir_exists,
            file_exists=file_exists,
            home=self.home,
        )

    def active_mapping(self, cwd: StrPath | None = None) -> ProfileMapping | None:
        """Return the mapping whose directory contains ``cwd``."""
        return find_active_mapping(
            self.mappings(),
            cwd if cwd is not None else pathlib.Path.cwd(),
            home=self.home,
        )

    def profiles(self) -> list[ProfileEntry]:
        """List profile files with the includes that activate each one."""
        return list_profiles(self.profiles_dir, self.mappings(), home=self.home)
