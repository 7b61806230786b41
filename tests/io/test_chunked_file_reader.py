"""Unit tests for ChunkedFileReader."""

import io

import pytest

from zipit.io.chunked_file_reader import ChunkedFileReader


def read_all(text: str, chunk_size: int = 4096) -> list:
    return list(ChunkedFileReader(io.StringIO(text), chunk_size=chunk_size))


def test_round_trip_of_source_text() -> None:
    text = "def handler(event, context):\n    return {'status': 200}\n" * 400
    chunks = read_all(text)
    assert len(chunks) > 1
    assert "".join(chunks) == text


def test_chunks_end_on_whitespace() -> None:
    text = "const value = compute(input);\n" * 500
    chunks = read_all(text)
    assert all(chunk[-1] in " \t\r\n" for chunk in chunks[:-1])


def test_mixed_whitespace_boundaries() -> None:
    text = ("word\tword\r\n" * 600) + "tail"
    chunks = read_all(text)
    assert "".join(chunks) == text
    assert all(chunk[-1] in " \t\r\n" for chunk in chunks[:-1])
    assert chunks[-1].endswith("tail")


def test_words_are_never_split() -> None:
    words = [f"identifier{i}" for i in range(2000)]
    text = " ".join(words)
    pieces = [piece for chunk in read_all(text) for piece in chunk.split()]
    assert pieces == words


@pytest.mark.parametrize("text", ["", "x" * 10000, "minified" * 1500, " \n\t\r" * 3000])
def test_degenerate_inputs(text) -> None:
    assert "".join(read_all(text)) == text


def test_small_input_is_one_chunk() -> None:
    assert read_all("print('hello')\n", chunk_size=65536) == ["print('hello')\n"]


def test_exhausted_reader_stays_empty() -> None:
    reader = ChunkedFileReader(io.StringIO("a b c " * 2000), chunk_size=4096)
    assert "".join(reader) == "a b c " * 2000
    assert list(reader) == []


def test_chunk_size_below_minimum() -> None:
    with pytest.raises(ValueError, match="chunk_size must be at least 4096"):
        ChunkedFileReader(io.StringIO(""), chunk_size=1024)
