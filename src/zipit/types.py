from enum import Enum
from os import PathLike
from typing import Union

# Complete path type including strings and any path-like object
PathType = Union[str, PathLike[str]]


class RuleSource(Enum):
    """Origin of an exclusion rule.

    Attributes:
        DEFAULT: Built-in exclusion shipped with zipit.
        GITIGNORE: Pattern read from a .gitignore file inside the project.
        USER: Pattern passed on the command line or through the API.
    """

    DEFAULT = "default"
    GITIGNORE = "gitignore"
    USER = "user"
