"""Metadata for gitlinker package."""

from __future__ import annotations

__title__ = "gitlinker"
__package_name__ = "gitlinker"
__description__ = "Safely link Git identity profiles into ~/.gitconfig via includeIf"
__version__ = "0.3.0"
__author__ = "gitlinker contributors"
__github__ = "https://github.com/gitlinker/gitlinker"
__docs__ = "https://github.com/gitlinker/gitlinker#readme"
__tracker__ = "https://github.com/gitlinker/gitlinker/issues"
__pypi__ = "https://pypi.org/project/gitlinker/"
__email__ = "gitlinker@example.com"
__license__ = "MIT"
__copyright__ = "Copyright 2024- gitlinker contributors"
