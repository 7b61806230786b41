"""Layered inclusion decisions for project files.

The FileFilter combines three sources of exclusions into one predicate:

1. Built-in defaults (dependency directories, build output, caches, ...)
2. Patterns from every .gitignore file found below the project root
3. User-supplied exclude and include patterns

User excludes take part twice: as gitignore-style patterns matched at any depth,
and as plain substrings checked against paths that no pattern matched. Includes
are substrings that rescue a path from a pattern match.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Optional, Set, Tuple

from zipit.file_system_tree.file_identifier import FileIdentifier
from zipit.types import PathType, RuleSource

from .defaults import DEFAULT_EXCLUDES, GITIGNORE_FILENAME, TRAVERSAL_SKIP_DIRS
from .git_rules import GitIgnoreExclusionRules

logger = logging.getLogger(__name__)


def to_relative_path(path: PathType, root_dir: Optional[PathType] = None) -> str:
    """Normalize a path to the root-relative, forward-slash form used for matching.

    Args:
        path: Absolute path, or a path relative to ``root_dir``.
        root_dir: Project root. If omitted, ``path`` is taken as already relative
            and only separators and leading "./" or "/" are normalized.

    Returns:
        The root-relative path, or an empty string for the root itself.

    Example:
        >>> to_relative_path("/work/app/src/main.py", "/work/app")
        'src/main.py'
        >>> to_relative_path("src\\\\lib\\\\util.py")
        'src/lib/util.py'
        >>> to_relative_path("./docs/index.md", ".")
        'docs/index.md'
    """
    text = os.fspath(path).replace("\\", "/")
    if root_dir is not None:
        root = os.fspath(root_dir).replace("\\", "/").rstrip("/")
        if text == root:
            return ""
        if root and text.startswith(root + "/"):
            text = text[len(root) + 1 :]  # noqa: E203
        elif os.path.isabs(text):
            text = os.path.relpath(text, os.fspath(root_dir)).replace("\\", "/")

    while text.startswith("./"):
        text = text[2:]
    text = text.lstrip("/")
    return "" if text == "." else text


@dataclass(frozen=True)
class FilterConfiguration:
    """User-supplied filter settings for one invocation.

    Attributes:
        custom_excludes: Extra exclusion patterns. Each is registered as a gitignore
            pattern matching at any depth and is also checked as a substring.
        custom_includes: Substrings that force inclusion of otherwise excluded paths.
    """

    custom_excludes: Tuple[str, ...] = field(default_factory=tuple)
    custom_includes: Tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def from_options(
        cls, excludes: Optional[Iterable[str]] = None, includes: Optional[Iterable[str]] = None
    ) -> "FilterConfiguration":
        return cls(tuple(excludes or ()), tuple(includes or ()))


class FileFilter:
    """Decides whether project paths are packaged.

    A filter is created per run, seeded with DEFAULT_EXCLUDES and the user's
    patterns, extended once by load_gitignore(), and then only queried.

    Attributes:
        config (FilterConfiguration): The user settings the filter was built from.
        rules (GitIgnoreExclusionRules): The underlying pattern matcher.

    Example:
        >>> file_filter = FileFilter(custom_excludes=["secrets"])
        >>> file_filter.is_excluded("web/node_modules/react/index.js")
        True
        >>> file_filter.is_excluded("config/secrets.json")
        True
        >>> file_filter.is_included("src/app.ts")
        True
    """

    def __init__(
        self,
        custom_excludes: Optional[Iterable[str]] = None,
        custom_includes: Optional[Iterable[str]] = None,
        default_excludes: Iterable[str] = DEFAULT_EXCLUDES,
    ) -> None:
        self.config = FilterConfiguration.from_options(custom_excludes, custom_includes)
        self.rules = GitIgnoreExclusionRules()
        self.rules.add_rules(list(default_excludes), source=RuleSource.DEFAULT, any_depth=True)
        self.rules.add_rules(list(self.config.custom_excludes), source=RuleSource.USER, any_depth=True)

        self._exclude_substrings = tuple(p.replace("\\", "/") for p in self.config.custom_excludes if p)
        self._include_substrings = tuple(p.replace("\\", "/") for p in self.config.custom_includes if p)

    @classmethod
    def for_project(cls, root_dir: PathType, config: Optional[FilterConfiguration] = None) -> "FileFilter":
        """Create a filter for ``root_dir`` and load every .gitignore file below it."""
        config = config or FilterConfiguration()
        file_filter = cls(config.custom_excludes, config.custom_includes)
        file_filter.load_gitignore(root_dir)
        return file_filter

    def load_gitignore(self, root_dir: PathType) -> None:
        """Load .gitignore files from ``root_dir`` and all of its included subdirectories.

        Patterns from a nested .gitignore only apply at or below the directory that
        holds it. Directories already excluded at the time they are reached, symbolic
        links to directories, .git and node_modules are not searched. Unreadable files
        and directories are skipped.

        Args:
            root_dir: The project root.
        """
        root = Path(os.path.abspath(root_dir))
        self._load_gitignore_recursive(root, root, set())

    def _load_gitignore_recursive(self, root: Path, current: Path, visited: Set[FileIdentifier]) -> None:
        file_id = FileIdentifier.of(current)
        if file_id is None or file_id in visited:
            return
        visited.add(file_id)

        gitignore_path = current / GITIGNORE_FILENAME
        if gitignore_path.is_file():
            try:
                self.rules.load_rules(gitignore_path, base_dir=to_relative_path(current, root))
            except (OSError, UnicodeDecodeError) as e:
                logger.debug("Could not read %s: %s", gitignore_path, e)

        try:
            entries = sorted(os.listdir(current))
        except OSError as e:
            logger.debug("Could not list %s: %s", current, e)
            return

        for entry in entries:
            if entry in TRAVERSAL_SKIP_DIRS:
                continue
            child = current / entry
            try:
                # Symlinked directories are not enumerated, so their rules never apply
                if child.is_symlink() or not child.is_dir():
                    continue
            except OSError as e:
                logger.debug("Could not stat %s: %s", child, e)
                continue
            if self.is_excluded(child, root, is_dir=True):
                continue
            self._load_gitignore_recursive(root, child, visited)

    def _matches_rules(self, relative_path: str, is_dir: bool) -> bool:
        # As in Git, nothing below an ignored directory can be re-included
        parts = relative_path.split("/")
        for depth in range(1, len(parts)):
            if self.rules.exclude("/".join(parts[:depth]) + "/"):
                return True

        if self.rules.exclude(relative_path):
            return True
        return is_dir and self.rules.exclude(relative_path + "/")

    def is_excluded(self, path: PathType, root_dir: Optional[PathType] = None, is_dir: bool = False) -> bool:
        """Check whether a path is left out of the output.

        Args:
            path: Path to check, absolute or relative to ``root_dir``.
            root_dir: Project root used to make ``path`` root-relative.
            is_dir: Whether the path is a directory, so that directory-only
                patterns such as "build/" apply to the directory itself.

        Returns:
            bool: True if the path is excluded.
        """
        relative_path = to_relative_path(path, root_dir)
        if not relative_path:
            return False

        try:
            matched = self._matches_rules(relative_path, is_dir)
        except Exception as e:
            logger.debug("Pattern matching failed for %r: %s", relative_path, e)
            matched = False

        if matched:
            if self._include_substrings:
                return not any(include in relative_path for include in self._include_substrings)
            return True

        return any(exclude in relative_path for exclude in self._exclude_substrings)

    def is_included(self, path: PathType, root_dir: Optional[PathType] = None, is_dir: bool = False) -> bool:
        """Logical negation of is_excluded()."""
        return not self.is_excluded(path, root_dir, is_dir=is_dir)
