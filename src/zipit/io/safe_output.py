"""All-or-nothing output files.

The archive or text dump is written to a temporary file next to its destination
and only moved into place once writing finished without an error. A failed run
therefore never leaves a truncated artifact behind.
"""

import logging
import os
import tempfile
import types
from pathlib import Path
from typing import IO, Any, Optional, Type

from zipit.types import PathType

logger = logging.getLogger(__name__)


class SafeOutputFile:
    """Context manager writing an output artifact atomically.

    Missing parent directories of the destination are created on entry. On a clean
    exit the temporary file replaces the destination; on an exception it is
    removed and the exception propagates.

    Attributes:
        path (Path): Final destination of the artifact.
        mode (str): "w" for text output or "wb" for binary output.
        file (IO): The open temporary file while inside the context.

    Example:
        >>> import os, tempfile
        >>> target = os.path.join(tempfile.mkdtemp(), "out", "dump.txt")
        >>> with SafeOutputFile(target) as output:
        ...     output.write("hello\\n")
        >>> open(target).read()
        'hello\\n'
    """

    def __init__(self, path: PathType, mode: str = "w", encoding: str = "utf-8") -> None:
        if mode not in ("w", "wb"):
            raise ValueError(f"Unsupported mode {mode!r}; expected 'w' or 'wb'")
        self.path = Path(os.path.abspath(path))
        self.mode = mode
        self.encoding = encoding
        self._temp_path: Optional[Path] = None
        self._file: Optional[IO[Any]] = None
        self._closed = False

    @property
    def file(self) -> IO[Any]:
        if self._file is None or self._closed:
            raise ValueError("SafeOutputFile is not open")
        return self._file

    def open(self) -> "SafeOutputFile":
        """Create the destination directory and the temporary file."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, temp_name = tempfile.mkstemp(prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent)
        self._temp_path = Path(temp_name)
        if self.mode == "wb":
            self._file = os.fdopen(fd, "wb")
        else:
            self._file = os.fdopen(fd, "w", encoding=self.encoding, newline="")
        return self

    def write(self, data: Any) -> None:
        self.file.write(data)

    def commit(self) -> None:
        """Close the temporary file and move it over the destination."""
        if self._closed:
            return
        self.file.close()
        self._closed = True
        assert self._temp_path is not None
        # mkstemp creates the file as 0600; give the artifact regular permissions
        umask = os.umask(0)
        os.umask(umask)
        os.chmod(self._temp_path, 0o666 & ~umask)
        os.replace(self._temp_path, self.path)

    def discard(self) -> None:
        """Close and delete the temporary file without touching the destination."""
        if self._file is not None and not self._closed:
            try:
                self._file.close()
            except OSError as e:
                logger.debug("Error closing %s: %s", self._temp_path, e)
        self._closed = True
        if self._temp_path is not None:
            try:
                self._temp_path.unlink()
            except FileNotFoundError:
                pass

    def __enter__(self) -> "SafeOutputFile":
        return self.open()

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional[types.TracebackType],
    ) -> None:
        if exc_type is not None:
            self.discard()
            return
        try:
            self.commit()
        except BaseException:
            self.discard()
            raise
