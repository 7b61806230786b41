"""Project packaging utilities.

This package bundles a project's source tree into a ZIP archive or a single
annotated text dump, skipping dependency directories, build output and anything
matched by the project's .gitignore files.
"""

from importlib.metadata import PackageNotFoundError, version

# Expose the version for both programmatic use and CLI
try:
    __version__ = version("zipit")
except PackageNotFoundError:
    __version__ = "unknown"
