"""Test configuration and fixtures for zipit."""

from pathlib import Path

import pytest


def write_files(root: Path, files: dict) -> Path:
    """Create ``files`` (relative path -> text content) below ``root``."""
    for relative_path, content in files.items():
        path = root / relative_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    return root


@pytest.fixture
def make_project(tmp_path):
    """Factory creating a project directory from a mapping of paths to contents."""

    def _make(files: dict, name: str = "project") -> Path:
        root = tmp_path / name
        root.mkdir()
        return write_files(root, files)

    return _make


@pytest.fixture
def sample_project(make_project):
    """A small project with dependency and build directories next to the source."""
    return make_project(
        {
            "src/a.ts": "export const a = 1;\n",
            "node_modules/x/index.js": "module.exports = {};\n",
            "build/out.js": "console.log('built');\n",
            ".gitignore": "build/\n",
        }
    )
