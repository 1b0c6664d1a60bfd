#!/usr/bin/env python
"""Link Git identity profiles into ``~/.gitconfig`` with ``includeIf``.

:copyright: Copyright 2024- gitlinker contributors.
:license: MIT, see LICENSE for details
"""

# Set default logging handler to avoid "No handler found" warnings.
from __future__ import annotations

import logging
from logging import NullHandler

from .document import ConfigDocument, IncludeIfSection, PlainSection, ProfileMapping
from .exc import MalformedIncludeError
from .linker import (
    ConfigLinker,
    add_include,
    list_mappings,
    remove_includes_for_missing_dirs,
)
from .parser import parse, serialize
from .profiles import ProfileEntry, list_profiles

logging.getLogger(__name__).addHandler(NullHandler())

__all__ = [
    "ConfigDocument",
    "ConfigLinker",
    "IncludeIfSection",
    "MalformedIncludeError",
    "PlainSection",
    "ProfileEntry",
    "ProfileMapping",
    "add_include",
    "list_mappings",
    "list_profiles",
    "parse",
    "remove_includes_for_missing_dirs",
    "serialize",
]
