"""Utility functions for gitlinker."""

from __future__ import annotations

import os
import pathlib


def get_config_dir() -> pathlib.Path:
    """
    Return gitlinker configuration directory.

    ``GITLINKER_CONFIGDIR`` environmental variable has precedence if set. We also
    evaluate XDG default directory from XDG_CONFIG_HOME environmental variable
    if set or its default.

    Unlike the git profiles directory this is never created here; callers that
    only read settings treat a missing directory as "no settings".

    Returns
    -------
    pathlib.Path :
        absolute path to gitlinker config directory
    """
    if "GITLINKER_CONFIGDIR" in os.environ:
        return pathlib.Path(os.environ["GITLINKER_CONFIGDIR"]).expanduser()
    if "XDG_CONFIG_HOME" in os.environ:
        return pathlib.Path(os.environ["XDG_CONFIG_HOME"]).expanduser() / "gitlinker"
    return pathlib.Path("~/.config/gitlinker/").expanduser()

