"""Per-file metadata shown in the text dump."""

import math
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Optional

from zipit.io.chunked_file_reader import ChunkedFileReader
from zipit.token_counter import TokenCounter
from zipit.types import PathType

LANGUAGE_MAP = {
    ".js": "JavaScript",
    ".jsx": "JavaScript (React)",
    ".ts": "TypeScript",
    ".tsx": "TypeScript (React)",
    ".py": "Python",
    ".java": "Java",
    ".cpp": "C++",
    ".c": "C",
    ".cs": "C#",
    ".go": "Go",
    ".rs": "Rust",
    ".rb": "Ruby",
    ".php": "PHP",
    ".swift": "Swift",
    ".kt": "Kotlin",
    ".scala": "Scala",
    ".clj": "Clojure",
    ".hs": "Haskell",
    ".ml": "OCaml",
    ".vue": "Vue",
    ".svelte": "Svelte",
    ".html": "HTML",
    ".css": "CSS",
    ".scss": "SCSS",
    ".sass": "SASS",
    ".less": "Less",
    ".json": "JSON",
    ".xml": "XML",
    ".yaml": "YAML",
    ".yml": "YAML",
    ".toml": "TOML",
    ".ini": "INI",
    ".conf": "Config",
    ".sh": "Shell",
    ".bash": "Bash",
    ".zsh": "Zsh",
    ".fish": "Fish",
    ".ps1": "PowerShell",
    ".bat": "Batch",
    ".cmd": "Batch",
    ".sql": "SQL",
    ".md": "Markdown",
    ".txt": "Text",
    ".dockerfile": "Dockerfile",
    ".dockerignore": "Docker Ignore",
    ".gitignore": "Git Ignore",
    ".gitattributes": "Git Attributes",
    ".env": "Environment",
    ".lock": "Lock File",
    ".log": "Log",
}

_SIZE_UNITS = ("B", "KB", "MB", "GB")


def get_file_language(file_path: PathType) -> str:
    """Get a display label for the file's language or type.

    Example:
        >>> get_file_language("src/App.tsx")
        'TypeScript (React)'
        >>> get_file_language("docker/Dockerfile.dev")
        'Dockerfile'
        >>> get_file_language(".env.example")
        'Environment'
        >>> get_file_language(".gitignore")
        'Git Ignore'
        >>> get_file_language("data.parquet")
        'PARQUET'
        >>> get_file_language("LICENSE")
        'Unknown'
    """
    name = os.path.basename(os.fspath(file_path)).lower()
    ext = os.path.splitext(name)[1]

    if name == "dockerfile" or name.startswith("dockerfile."):
        return "Dockerfile"
    if name == "makefile" or name.startswith("makefile."):
        return "Makefile"
    if name.startswith(".env"):
        return "Environment"
    if name in LANGUAGE_MAP:
        return LANGUAGE_MAP[name]

    return LANGUAGE_MAP.get(ext) or ext[1:].upper() or "Unknown"


def format_file_size(num_bytes: int) -> str:
    """Format a byte count with a binary unit, rounded to two decimals.

    Example:
        >>> format_file_size(0)
        '0 B'
        >>> format_file_size(512)
        '512 B'
        >>> format_file_size(1536)
        '1.5 KB'
        >>> format_file_size(1024 * 1024)
        '1 MB'
        >>> format_file_size(1234567)
        '1.18 MB'
    """
    if num_bytes <= 0:
        return "0 B"
    exponent = 0
    while num_bytes >= 1024 ** (exponent + 1) and exponent < len(_SIZE_UNITS) - 1:
        exponent += 1
    value = math.floor(num_bytes / 1024**exponent * 100 + 0.5) / 100
    text = str(int(value)) if value == int(value) else str(value)
    return f"{text} {_SIZE_UNITS[exponent]}"


def iter_file_text(path: PathType, encoding: str = "utf-8") -> Iterator[str]:
    """Stream a file's text in chunks, replacing undecodable bytes.

    Raises:
        OSError: If the file cannot be opened or read.
    """
    with open(path, "r", encoding=encoding, errors="replace", newline="") as f:
        yield from ChunkedFileReader(f)


@dataclass(frozen=True)
class FileRecord:
    """Metadata about one file in the dump.

    Attributes:
        path: Absolute path of the file.
        relative_path: Root-relative path shown in the dump.
        size: Size in bytes.
        line_count: Number of newline characters plus one.
        language: Display label from get_file_language().
        token_count: Number of tokens, or None when token counting is disabled.
    """

    path: Path
    relative_path: str
    size: int
    line_count: int
    language: str
    token_count: Optional[int] = None

    @classmethod
    def from_path(
        cls,
        path: PathType,
        relative_path: str,
        tokenizer: Optional[TokenCounter] = None,
        encoding: str = "utf-8",
    ) -> "FileRecord":
        """Stat and scan a file to build its record.

        The file is read once in chunks to count lines and, if a tokenizer is
        given, tokens. Nothing is cached between runs.

        Raises:
            OSError: If the file cannot be stat'ed or read.
            TokenizationError: If token counting fails.
        """
        path = Path(path)
        size = os.stat(path).st_size
        newlines = 0
        tokens: Optional[int] = 0 if tokenizer is not None else None
        for chunk in iter_file_text(path, encoding=encoding):
            newlines += chunk.count("\n")
            if tokenizer is not None and tokens is not None:
                tokens += tokenizer.count(chunk)

        return cls(
            path=path,
            relative_path=relative_path,
            size=size,
            line_count=newlines + 1,
            language=get_file_language(relative_path),
            token_count=tokens,
        )
