"""Implementation of exclusion rules using .gitignore pattern syntax."""

import logging
import re
from dataclasses import dataclass
from os import PathLike
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union

from pathspec import PathSpec
from pathspec.pattern import Pattern
from pathspec.patterns.gitignore.basic import GitIgnoreBasicPattern

from zipit.types import PathType, RuleSource

from .base_rules import BaseExclusionRules

logger = logging.getLogger(__name__)

_GLOB_SPECIAL = re.compile(r"([*?\[\]\\])")


@dataclass(frozen=True)
class ExclusionRule:
    """A registered pattern together with where it came from.

    Attributes:
        pattern: The pattern exactly as handed to the matcher.
        source: Whether the rule is a built-in default, came from a .gitignore file,
            or was supplied by the user.
    """

    pattern: str
    source: RuleSource

    @property
    def negated(self) -> bool:
        return self.pattern.startswith("!")


def _split_negation(pattern: str) -> Tuple[str, str]:
    if pattern.startswith("!"):
        return "!", pattern[1:]
    return "", pattern


def anchor_any_depth(pattern: str) -> str:
    """Rewrite a pattern so that it matches at any depth below the root.

    Root-anchored patterns (leading "/") and patterns already starting with "**/"
    are returned unchanged.

    Example:
        >>> anchor_any_depth("dist")
        '**/dist'
        >>> anchor_any_depth("!keep.log")
        '!**/keep.log'
        >>> anchor_any_depth("/only-at-root")
        '/only-at-root'
    """
    negation, body = _split_negation(pattern)
    if body.startswith("/") or body.startswith("**/"):
        return pattern
    return f"{negation}**/{body}"


def rebase_pattern(pattern: str, base_dir: str) -> Optional[str]:
    """Rewrite a pattern read from ``<base_dir>/.gitignore`` relative to the project root.

    Patterns containing a slash before their last character are relative to the
    directory holding the .gitignore file. All other patterns match at any depth
    below that directory.

    Args:
        pattern: A single stripped, non-comment line from a .gitignore file.
        base_dir: Root-relative, slash-separated directory of the .gitignore file.
            An empty string means the project root.

    Returns:
        The rebased pattern, or None if nothing meaningful is left to match.

    Example:
        >>> rebase_pattern("*.tmp", "pkg")
        '/pkg/**/*.tmp'
        >>> rebase_pattern("/local.cfg", "pkg/sub")
        '/pkg/sub/local.cfg'
        >>> rebase_pattern("!keep.tmp", "pkg")
        '!/pkg/**/keep.tmp'
        >>> rebase_pattern("build/", "")
        'build/'
    """
    if not base_dir:
        return pattern

    negation, body = _split_negation(pattern)
    if not body.strip("/"):
        return None

    prefix = "/" + "/".join(_GLOB_SPECIAL.sub(r"\\\1", part) for part in base_dir.strip("/").split("/"))
    if "/" in body.rstrip("/"):
        return f"{negation}{prefix}/{body.lstrip('/')}"
    return f"{negation}{prefix}/**/{body}"


class GitIgnoreExclusionRules(BaseExclusionRules):
    """Implementation of exclusion rules using .gitignore pattern syntax.

    Patterns are compiled with the pathspec library and matched the way Git does:

    - Basic globs (*, ?, [abc], [0-9], etc.)
    - Directory-specific patterns (ending in /)
    - Negation patterns (starting with !), with later rules winning
    - Double-asterisk matching (**)
    - Comment lines (starting with #) and blank lines are skipped

    Patterns that cannot be compiled are skipped rather than raised, so one bad line
    in a .gitignore file never aborts a run.

    Attributes:
        rules (List[ExclusionRule]): Registered rules in the order they were added.

    Example:
        >>> rules = GitIgnoreExclusionRules()
        >>> rules.add_rule("*.log")
        True
        >>> rules.add_rule("!important.log")
        True
        >>> rules.exclude("logs/app.log")
        True
        >>> rules.exclude("important.log")
        False

    Note:
        The paths provided to exclude() must be root-relative and use forward slashes.
    """

    def __init__(self) -> None:
        self.rules: List[ExclusionRule] = []
        self._patterns: List[Pattern] = []
        self._spec: Optional[PathSpec] = None

    @property
    def spec(self) -> PathSpec:
        """Compiled matcher for all registered patterns, rebuilt after additions."""
        if self._spec is None:
            self._spec = PathSpec(self._patterns)
        return self._spec

    def exclude(self, path: str) -> bool:
        """Check if a path is ignored by the registered patterns.

        Args:
            path: Root-relative path with forward slashes. Append "/" for directories.

        Returns:
            bool: True if the last pattern matching the path is not a negation.

        Example:
            >>> rules = GitIgnoreExclusionRules()
            >>> rules.add_rule("build/")
            True
            >>> rules.exclude("build/")
            True
            >>> rules.exclude("build/app.js")
            True
            >>> rules.exclude("build")
            False
        """
        return bool(self.spec.match_file(path))

    def add_rule(self, rule: str, source: RuleSource = RuleSource.USER, any_depth: bool = False) -> bool:
        """Add a single .gitignore pattern.

        Args:
            rule: A .gitignore pattern, e.g. "*.pyc", "node_modules/" or "!keep.txt".
            source: Origin of the rule, recorded for inspection.
            any_depth: Match the pattern at any depth below the root even if it
                contains a slash. Root-anchored patterns are left as they are.

        Returns:
            bool: True if the pattern was registered, False if it was blank, a comment,
                consisted only of slashes, or could not be compiled.
        """
        # pathspec treats "/" as "everything" while Git ignores it
        if not _split_negation(rule)[1].strip().strip("/"):
            return False

        if any_depth:
            rule = anchor_any_depth(rule)

        try:
            pattern = GitIgnoreBasicPattern(rule)
        except (ValueError, re.error) as e:
            logger.debug("Skipping malformed pattern %r: %s", rule, e)
            return False

        if pattern.include is None:
            return False

        self._patterns.append(pattern)
        self.rules.append(ExclusionRule(rule, source))
        self._spec = None
        return True

    def add_rules(self, rules: Sequence[str], source: RuleSource = RuleSource.USER, any_depth: bool = False) -> int:
        """Add several patterns in order and return how many were registered."""
        return sum(1 for rule in rules if self.add_rule(rule, source=source, any_depth=any_depth))

    def load_rules(self, rules_files: Union[PathType, Sequence[PathType]], base_dir: str = "") -> None:
        """Load patterns from one or more .gitignore-style files.

        Args:
            rules_files: Path(s) to file(s) containing .gitignore patterns.
            base_dir: Root-relative directory the files belong to. Patterns are
                rebased onto it so they only apply at or below that directory.

        Raises:
            FileNotFoundError: If any rules file does not exist.
            UnicodeDecodeError: If a rules file is not valid UTF-8.

        Example:
            >>> import os, tempfile
            >>> with tempfile.NamedTemporaryFile(mode='w', delete=False) as f:
            ...     _ = f.write('# generated files\\n\\n*.tmp\\n')
            >>> rules = GitIgnoreExclusionRules()
            >>> rules.load_rules(f.name, base_dir="pkg")
            >>> rules.exclude("pkg/x.tmp")
            True
            >>> rules.exclude("other/x.tmp")
            False
            >>> os.unlink(f.name)
        """
        if isinstance(rules_files, (str, PathLike)):
            rules_files = [rules_files]

        for rules_file in rules_files:
            path = Path(rules_file)
            if not path.exists():
                raise FileNotFoundError(f"Rules file not found: {path}")

            with open(path, "r", encoding="utf-8") as f:
                lines = f.read().splitlines()

            for line in lines:
                pattern = line.strip()
                if not pattern or pattern.startswith("#"):
                    continue
                rebased = rebase_pattern(pattern, base_dir)
                if rebased is not None:
                    self.add_rule(rebased, source=RuleSource.GITIGNORE)
