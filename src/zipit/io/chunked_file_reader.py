"""Tools for chunk-based file reading operations."""

from typing import Iterator, TextIO


class ChunkedFileReader:
    """Iterator over a text file in bounded chunks that end on whitespace when possible.

    Keeping chunk boundaries on whitespace means a word is never split across two
    chunks, so per-chunk token counts add up to the count for the whole file. The
    part of a chunk after its last whitespace character is carried over into the
    next chunk.

    Args:
        file_obj: An opened text file object.
        chunk_size: Number of characters to read per call. Must be at least 4096.

    Raises:
        ValueError: If chunk_size is less than 4096.

    Example:
        >>> import io
        >>> reader = ChunkedFileReader(io.StringIO("alpha beta\\ngamma"))
        >>> "".join(reader)
        'alpha beta\\ngamma'
    """

    MINIMUM_CHUNK_SIZE = 4096

    def __init__(self, file_obj: TextIO, chunk_size: int = 65536) -> None:
        if chunk_size < self.MINIMUM_CHUNK_SIZE:
            raise ValueError(f"chunk_size must be at least {self.MINIMUM_CHUNK_SIZE}, got {chunk_size}")

        self._file: TextIO = file_obj
        self._chunk_size: int = chunk_size
        self._carry: str = ""

    def __iter__(self) -> Iterator[str]:
        return self

    def __next__(self) -> str:
        data = self._file.read(self._chunk_size)
        if not data:
            if self._carry:
                content, self._carry = self._carry, ""
                return content
            raise StopIteration

        content = self._carry + data
        split_at = max(content.rfind(" "), content.rfind("\n"), content.rfind("\t"), content.rfind("\r"))
        if split_at == -1:
            self._carry = ""
            return content

        self._carry = content[split_at + 1 :]  # noqa: E203
        return content[: split_at + 1]
