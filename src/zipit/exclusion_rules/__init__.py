"""Exclusion rules for filtering project files and directories."""

from .base_rules import BaseExclusionRules
from .defaults import DEFAULT_EXCLUDES
from .file_filter import FileFilter, FilterConfiguration
from .git_rules import ExclusionRule, GitIgnoreExclusionRules

__all__ = [
    "BaseExclusionRules",
    "DEFAULT_EXCLUDES",
    "ExclusionRule",
    "FileFilter",
    "FilterConfiguration",
    "GitIgnoreExclusionRules",
]
