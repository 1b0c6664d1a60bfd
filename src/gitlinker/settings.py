"""User settings for gitlinker.

Reads an optional ``settings.yaml`` (or ``.yml`` / ``.json``) from the
gitlinker config directory (see :func:`gitlinker.util.get_config_dir`) and
validates it with pydantic.
"""

from __future__ import annotations

import json
import logging
import os
import pathlib
import typing as t

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from . import exc
from ._internal.config_reader import ConfigReader
from ._internal.private_path import PrivatePath
from .fileio import DEFAULT_BACKUP_SUFFIX_FORMAT
from .util import get_config_dir

if t.TYPE_CHECKING:
    from .types import RawSettingsDict

log = logging.getLogger(__name__)

SETTINGS_FILENAMES = ("settings.yaml", "settings.yml", "settings.json")
GITCONFIG_ENV = "GITLINKER_GITCONFIG"


class LinkerSettings(BaseModel):
    """Parsed gitlinker user settings.

    Examples
    --------
    >>> LinkerSettings().gitconfig
    '~/.gitconfig'
    >>> LinkerSettings(profiles_dir="~/profiles/").profiles_dir
    '~/profiles/'
    """

    model_config = ConfigDict(extra="ignore")

    gitconfig: str = "~/.gitconfig"
    profiles_dir: str = "~/.config/git/profiles"
    backup: bool = True
    backup_suffix_format: str = DEFAULT_BACKUP_SUFFIX_FORMAT
    fsync: bool = True

    @field_validator("gitconfig", "profiles_dir", "backup_suffix_format")
    @classmethod
    def validate_not_empty(cls, v: str) -> str:
        """Reject empty strings.

        Parameters
        ----------
        v : str
            The value to check

        Returns
        -------
        str
            The value, unchanged
        """
        if not v.strip():
            msg = "must not be empty"
            raise ValueError(msg)
        return v

    @property
    def gitconfig_path(self) -> pathlib.Path:
        return pathlib.Path(self.gitconfig).expanduser()

    @property
    def profiles_path(self) -> pathlib.Path:
        return pathlib.Path(self.profiles_dir).expanduser()


def find_settings_file(config_dir: pathlib.Path | None = None) -> pathlib.Path | None:
    """Return the first settings file present in ``config_dir``."""
    if config_dir is None:
        config_dir = get_config_dir()
    for name in SETTINGS_FILENAMES:
        candidate = config_dir / name
        if candidate.is_file():
            return candidate
    return None


def load_settings(
    config_dir: pathlib.Path | None = None,
    *,
    strict: bool = False,
) -> LinkerSettings:
    """Load settings from the gitlinker config directory.

    Returns the default settings when no settings file exists. When the file
    cannot be parsed or validated, defaults are returned with a warning, or
    :class:`~gitlinker.exc.ConfigLoadError` is raised if ``strict``.

    ``GITLINKER_GITCONFIG`` overrides the ``gitconfig`` setting.

    Examples
    --------
    >>> settings = load_settings(tmp_path)
    >>> settings.backup
    True
    """
    settings_path = find_settings_file(config_dir)
    settings = LinkerSettings()

    if settings_path is not None:
        try:
            data = t.cast(
                "RawSettingsDict",
                ConfigReader.from_file(settings_path).content,
            )
            settings = LinkerSettings.model_validate(data)
        except (
            OSError,
            TypeError,
            ValidationError,
            json.JSONDecodeError,
            yaml.YAMLError,
        ) as e:
            if strict:
                raise exc.ConfigLoadError(
                    f"Invalid settings file: {e}",
                    path=settings_path,
                ) from e
            log.warning(
                "Failed to load %s; using default settings",
                PrivatePath(settings_path),
                exc_info=True,
            )
            settings = LinkerSettings()

    override = os.environ.get(GITCONFIG_ENV)
    if override:
        settings = settings.model_copy(update={"gitconfig": override})
    return settings
