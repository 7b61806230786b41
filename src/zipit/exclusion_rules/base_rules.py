from abc import ABC, abstractmethod
from typing import Sequence, Union

from zipit.types import PathType


class BaseExclusionRules(ABC):
    """
    Abstract base class defining the interface for path exclusion rules.

    Implementations decide whether a root-relative, slash-separated path should be
    left out of the packaged output. Loading rules from files and adding individual
    rules are optional capabilities that depend on the rule type.

    Example:
        >>> from zipit.exclusion_rules.git_rules import GitIgnoreExclusionRules
        >>> rules = GitIgnoreExclusionRules()
        >>> rules.add_rule('*.pyc')
        True
        >>> rules.exclude('pkg/module.pyc')
        True
        >>> rules.exclude('pkg/module.py')
        False
    """

    @abstractmethod
    def exclude(self, path: str) -> bool:
        """
        Determine if a given path should be excluded based on the loaded rules.

        Args:
            path (str): Root-relative path using forward slashes. Directories may be
                passed with a trailing slash so that directory-only rules apply.

        Returns:
            bool: True if the path should be excluded, False if it should be included.
        """
        pass

    def load_rules(self, rules_files: Union[PathType, Sequence[PathType]]) -> None:
        """
        Load exclusion rules from one or more files.

        Args:
            rules_files: Path to a file or sequence of paths containing exclusion rules.

        Raises:
            NotImplementedError: If this rule type doesn't support loading from files.
        """
        raise NotImplementedError(f"{self.__class__.__name__} doesn't support loading rules from files.")

    def add_rule(self, rule: str) -> bool:
        """
        Add a single exclusion rule directly.

        Args:
            rule (str): The exclusion rule to add, e.g. a gitignore pattern like "*.pyc".

        Returns:
            bool: True if the rule was registered.

        Raises:
            NotImplementedError: If this rule type doesn't support adding individual rules.
        """
        raise NotImplementedError(f"{self.__class__.__name__} doesn't support adding individual rules.")
