"""Line-oriented parser and serializer for Git configuration files.

Only as much structure is recognised as gitlinker needs: section headers,
``key = value`` entries and ``gitdir:`` conditional includes. Everything else
is kept as opaque text so that ``serialize(parse(data)) == data``.

>>> text = b'[user]\\n\\tname = Default\\n'
>>> serialize(parse(text)) == text
True
"""

from __future__ import annotations

import io
import logging
import re
import typing as t

from . import exc
from .document import (
    ConfigDocument,
    ConfigLine,
    IncludeIfSection,
    PlainSection,
    is_blank,
    is_comment,
)

if t.TYPE_CHECKING:
    from .document import Section

log = logging.getLogger(__name__)

INCLUDE_IF_RE = re.compile(r'^\[includeIf\s+"gitdir:([^"]+)"\]\s*$')
SECTION_RE = re.compile(r"^\[([^\]]+)\]\s*$")
ENTRY_RE = re.compile(r"^\s*([A-Za-z0-9_-]+)\s*=\s*(.*)$")
PATH_RE = re.compile(r"^\s*path\s*=\s*(.+)$")

BOM = "\ufeff"


def _split_lines(text: str) -> list[str]:
    """Split keeping terminators; ``\\r\\n``, ``\\n`` and ``\\r`` end a line."""
    return list(io.StringIO(text, newline=""))


def _detect_newline(lines: list[str]) -> str:
    for line in lines:
        if line.endswith("\r\n"):
            return "\r\n"
        if line.endswith("\n"):
            return "\n"
    return "\n"


def _unquote(value: str) -> str:
    """Strip whitespace and one pair of surrounding double quotes.

    >>> _unquote(' "~/.config/git/profiles/work" ')
    '~/.config/git/profiles/work'
    >>> _unquote('~/profiles/"odd"')
    '~/profiles/"odd"'
    """
    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] == '"':
        return value[1:-1]
    return value


def _entry_line(raw: str) -> ConfigLine:
    content = raw.rstrip("\r\n")
    if not is_comment(content):
        match = ENTRY_RE.match(content)
        if match:
            return ConfigLine(raw, match.group(1), match.group(2))
    return ConfigLine(raw)


class _IncludeBuilder:
    def __init__(self, header: str, directory: str, line_number: int) -> None:
        self.header = header
        self.directory = directory
        self.line_number = line_number
        self.lines: list[ConfigLine] = []
        self.path: str | None = None
        self.path_index = -1
        self.searching = True

    def add(self, raw: str) -> None:
        content = raw.rstrip("\r\n")
        if self.searching and content.startswith("["):
            # Not a section header we recognise, but it still ends the search.
            self.searching = False
        if self.searching and not is_blank(content) and not is_comment(content):
            match = PATH_RE.match(content)
            if match:
                self.path = _unquote(match.group(1))
                self.path_index = len(self.lines)
                self.searching = False
                self.lines.append(ConfigLine(raw, "path", self.path))
                return
        self.lines.append(_entry_line(raw))

    def build(self) -> IncludeIfSection:
        if self.path is None:
            raise exc.MalformedIncludeError(self.line_number)
        return IncludeIfSection(
            header=ConfigLine(self.header),
            directory=self.directory,
            path=self.path,
            lines=tuple(self.lines),
            path_index=self.path_index,
        )


class _PlainBuilder:
    def __init__(self, header: str, name: str) -> None:
        self.header = header
        self.name = name
        self.lines: list[ConfigLine] = []

    def add(self, raw: str) -> None:
        self.lines.append(_entry_line(raw))

    def build(self) -> PlainSection:
        return PlainSection(
            header=ConfigLine(self.header),
            name=self.name,
            lines=tuple(self.lines),
        )


def parse(data: bytes | str | None) -> ConfigDocument:
    """Parse Git configuration text into a :class:`ConfigDocument`.

    A leading byte-order mark is set aside in :attr:`ConfigDocument.bom`
    and does not count as part of the first line.

    Parameters
    ----------
    data : bytes | str | None
        File contents. ``bytes`` are decoded as UTF-8. ``None`` stands for a
        missing file and yields an empty document.

    Raises
    ------
    MalformedIncludeError
        When a ``gitdir:`` include has no ``path =`` line before the next
        line starting with ``[``. Nothing is returned in that case.
    ConfigDecodeError
        When ``data`` is ``bytes`` that are not valid UTF-8.

    Examples
    --------
    >>> doc = parse(b'[includeIf "gitdir:~/work/"]\\n    path = ~/profiles/work\\n')
    >>> [(m.trigger_dir, m.profile_path) for m in (s.mapping() for s in doc.includes)]
    [('~/work/', '~/profiles/work')]

    >>> parse(b'\\xef\\xbb\\xbf[user]\\n').plain_sections[0].name
    'user'

    >>> parse(None).is_empty()
    True
    """
    if data is None:
        return ConfigDocument()
    if isinstance(data, bytes):
        try:
            text = data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise exc.ConfigDecodeError(e.start) from e
    else:
        text = data

    bom = ""
    if text.startswith(BOM):
        bom, text = BOM, text[len(BOM) :]
    raw_lines = _split_lines(text)

    preamble: list[ConfigLine] = []
    sections: list[Section] = []
    current: _IncludeBuilder | _PlainBuilder | None = None

    for line_number, raw in enumerate(raw_lines, start=1):
        content = raw.rstrip("\r\n")
        include_match = INCLUDE_IF_RE.match(content)
        section_match = None if include_match else SECTION_RE.match(content)

        if include_match or section_match:
            if current is not None:
                sections.append(current.build())
            if include_match:
                current = _IncludeBuilder(raw, include_match.group(1), line_number)
            else:
                assert section_match is not None
                current = _PlainBuilder(raw, section_match.group(1))
        elif current is None:
            preamble.append(ConfigLine(raw))
        else:
            current.add(raw)

    if current is not None:
        sections.append(current.build())

    log.debug(
        "parsed %d lines into %d sections (%d includes)",
        len(raw_lines),
        len(sections),
        sum(isinstance(s, IncludeIfSection) for s in sections),
    )
    return ConfigDocument(
        sections=tuple(sections),
        preamble=tuple(preamble),
        newline=_detect_newline(raw_lines),
        bom=bom,
    )


def serialize_text(document: ConfigDocument) -> str:
    """Render ``document`` back to text."""
    return document.bom + "".join(line.raw for line in document.iter_lines())


def serialize(document: ConfigDocument) -> bytes:
    """Render ``document`` back to UTF-8 bytes; the inverse of :func:`parse`."""
    return serialize_text(document).encode("utf-8")
