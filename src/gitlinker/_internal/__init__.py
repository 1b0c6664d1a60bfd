"""Internal utilities for gitlinker.

This module contains internal utilities that should not be used directly
by external code.
"""

from __future__ import annotations

from .config_reader import ConfigReader
from .private_path import PrivatePath

__all__ = ["ConfigReader", "PrivatePath"]
