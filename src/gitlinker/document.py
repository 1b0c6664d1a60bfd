"""In-memory model of a Git configuration file.

A :class:`ConfigDocument` keeps every line of the file it was parsed from, so
that an unmodified document serializes back to the exact same bytes. Sections
are immutable; the operations in :mod:`gitlinker.linker` build new documents
instead of editing one in place.
"""

from __future__ import annotations

import dataclasses
import os
import typing as t

if t.TYPE_CHECKING:
    import pathlib


def normalize_trigger_dir(directory: str) -> str:
    """Return ``directory`` with exactly one trailing ``/``.

    >>> normalize_trigger_dir("~/repositories/work")
    '~/repositories/work/'
    >>> normalize_trigger_dir("~/repositories/work//")
    '~/repositories/work/'
    >>> normalize_trigger_dir("/")
    '/'
    """
    return directory.rstrip("/") + "/"


def expand_home(path: str, home: str | pathlib.Path | None = None) -> str:
    """Expand a leading ``~`` in ``path``.

    ``home`` overrides the user's home directory, which keeps callers testable
    without touching the real one.

    >>> expand_home("~/work/", home="/home/u")
    '/home/u/work/'
    >>> expand_home("~", home="/home/u")
    '/home/u'
    >>> expand_home("/srv/work", home="/home/u")
    '/srv/work'
    """
    if home is None:
        return os.path.expanduser(path)
    if path == "~":
        return str(home)
    if path.startswith("~/"):
        return str(home).rstrip("/") + path[1:]
    return path


def is_blank(text: str) -> bool:
    return text.strip() == ""


def is_comment(text: str) -> bool:
    return text.lstrip().startswith(("#", ";"))


@dataclasses.dataclass(frozen=True)
class ConfigLine:
    """One physical line, terminator included.

    ``key``/``value`` are set when the line is a ``key = value`` entry;
    comments, blanks and anything unrecognised are carried opaquely.
    """

    raw: str
    key: str | None = None
    value: str | None = None

    @property
    def content(self) -> str:
        """Line text without its terminator."""
        return self.raw.rstrip("\r\n")

    @property
    def terminated(self) -> bool:
        return self.raw.endswith(("\n", "\r"))

    @property
    def blank(self) -> bool:
        return is_blank(self.raw)


@dataclasses.dataclass(frozen=True)
class PlainSection:
    """Any section other than a ``gitdir:`` conditional include.

    Examples: ``[user]``, ``[core]``, ``[alias]``, ``[includeIf "onbranch:x"]``.
    """

    header: ConfigLine
    name: str
    lines: tuple[ConfigLine, ...] = ()

    @property
    def entries(self) -> list[tuple[str, str]]:
        """Parsed ``(key, value)`` pairs in file order."""
        return [
            (line.key, line.value or "")
            for line in self.lines
            if line.key is not None
        ]

    def all_lines(self) -> tuple[ConfigLine, ...]:
        return (self.header, *self.lines)


@dataclasses.dataclass(frozen=True)
class IncludeIfSection:
    """``[includeIf "gitdir:<directory>"]`` followed by a ``path = ...`` line.

    ``directory`` is stored exactly as written; :attr:`trigger_dir` and
    :meth:`expanded_dir` are read-time projections of it.
    """

    header: ConfigLine
    directory: str
    path: str
    lines: tuple[ConfigLine, ...]
    path_index: int

    @property
    def condition_raw(self) -> str:
        return f"gitdir:{self.directory}"

    @property
    def trigger_dir(self) -> str:
        return normalize_trigger_dir(self.directory)

    def expanded_dir(self, home: str | pathlib.Path | None = None) -> str:
        """Absolute directory, ``~`` expanded and without a trailing ``/``."""
        expanded = expand_home(self.directory, home)
        return expanded.rstrip("/") or "/"

    def all_lines(self) -> tuple[ConfigLine, ...]:
        return (self.header, *self.lines)

    def mapping(self) -> ProfileMapping:
        return ProfileMapping(
            trigger_dir=self.trigger_dir,
            profile_path=self.path,
            source_section=self,
        )

    @classmethod
    def create(
        cls,
        trigger_dir: str,
        profile_path: str,
        newline: str = "\n",
    ) -> IncludeIfSection:
        """Build a section in canonical form.

        >>> section = IncludeIfSection.create("~/work", "~/.config/git/profiles/w")
        >>> print("".join(line.raw for line in section.all_lines()), end="")
        [includeIf "gitdir:~/work/"]
            path = ~/.config/git/profiles/w
        """
        directory = normalize_trigger_dir(trigger_dir)
        return cls(
            header=ConfigLine(f'[includeIf "gitdir:{directory}"]{newline}'),
            directory=directory,
            path=profile_path,
            lines=(_canonical_path_line(profile_path, newline),),
            path_index=0,
        )

    def with_path(self, profile_path: str) -> IncludeIfSection:
        """Return a copy whose ``path`` line points at ``profile_path``.

        Only the ``path`` line is rewritten; the header and any other lines
        of the block keep their bytes.
        """
        if profile_path == self.path:
            return self
        old_line = self.lines[self.path_index]
        newline = old_line.raw[len(old_line.content) :]
        lines = list(self.lines)
        lines[self.path_index] = _canonical_path_line(profile_path, newline)
        return dataclasses.replace(self, path=profile_path, lines=tuple(lines))


def _canonical_path_line(profile_path: str, newline: str) -> ConfigLine:
    return ConfigLine(f"    path = {profile_path}{newline}", "path", profile_path)


Section = t.Union[PlainSection, IncludeIfSection]


@dataclasses.dataclass(frozen=True)
class ProfileMapping:
    """A trigger directory and the profile it activates. Derived, never stored."""

    trigger_dir: str
    profile_path: str
    source_section: IncludeIfSection = dataclasses.field(repr=False, compare=False)

    def expanded_trigger_dir(self, home: str | pathlib.Path | None = None) -> str:
        return self.source_section.expanded_dir(home)

    def expanded_profile_path(self, home: str | pathlib.Path | None = None) -> str:
        return expand_home(self.profile_path, home)


@dataclasses.dataclass(frozen=True)
class ConfigDocument:
    """Ordered sections of a Git config file.

    ``preamble`` holds lines before the first section header (comments,
    usually). ``newline`` is the terminator used for lines gitlinker adds.
    ``bom`` is a byte-order mark found at the start of the file, written
    back in front of everything else.
    """

    sections: tuple[Section, ...] = ()
    preamble: tuple[ConfigLine, ...] = ()
    newline: str = "\n"
    bom: str = ""

    @property
    def includes(self) -> list[IncludeIfSection]:
        return [s for s in self.sections if isinstance(s, IncludeIfSection)]

    @property
    def plain_sections(self) -> list[PlainSection]:
        return [s for s in self.sections if isinstance(s, PlainSection)]

    def iter_lines(self) -> t.Iterator[ConfigLine]:
        yield from self.preamble
        for section in self.sections:
            yield from section.all_lines()

    def is_empty(self) -> bool:
        return not self.preamble and not self.sections

    def last_line(self) -> ConfigLine | None:
        last = None
        for last in self.iter_lines():  # noqa: B007
            pass
        return last


class AddResult(t.NamedTuple):
    """Outcome of :func:`gitlinker.linker.add_include`."""

    document: ConfigDocument
    updated: bool


class RemoveResult(t.NamedTuple):
    """Outcome of :func:`gitlinker.linker.remove_includes_for_missing_dirs`."""

    document: ConfigDocument
    removed_count: int
    removed: list[ProfileMapping]
