from __future__ import annotations

import os
import pathlib
import typing as t

if t.TYPE_CHECKING:
    PrivatePathBase = pathlib.Path
else:
    PrivatePathBase = type(pathlib.Path())


class PrivatePath(PrivatePathBase):
    """Path that renders the user's home directory as ``~``.

    Used whenever gitlinker logs a config, backup or profile location, so log
    output reads the same way the paths are written inside ``.gitconfig``.

    Examples
    --------
    >>> from pathlib import Path
    >>> home = Path.home()
    >>> PrivatePath(home)
    PrivatePath('~')
    >>> PrivatePath(home / ".gitconfig")
    PrivatePath('~/.gitconfig')
    >>> str(PrivatePath("/etc/gitconfig"))
    '/etc/gitconfig'
    >>> f'backup: {PrivatePath(home / ".gitconfig.backup.20240101_120000")}'
    'backup: ~/.gitconfig.backup.20240101_120000'
    """

    def __new__(cls, *args: t.Any, **kwargs: t.Any) -> PrivatePath:
        return super().__new__(cls, *args, **kwargs)

    @classmethod
    def _collapse_home(cls, value: str) -> str:
        """Replace a leading home directory in ``value`` with ``~``."""
        if value.startswith("~"):
            return value

        home = str(pathlib.Path.home())
        if value == home:
            return "~"

        separators = {os.sep}
        if os.altsep:
            separators.add(os.altsep)

        for sep in separators:
            if value.startswith(home + sep):
                return "~" + value[len(home) :]

        return value

    def __str__(self) -> str:
        return self._collapse_home(pathlib.Path.__str__(self))

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({str(self)!r})"


__all__ = ["PrivatePath"]
