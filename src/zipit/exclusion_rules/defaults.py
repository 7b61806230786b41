"""Built-in exclusions applied to every project."""

# Dependency, build, cache, editor and OS artifacts. Each entry is registered so
# that it matches at any depth, e.g. "dist" also excludes "packages/web/dist".
DEFAULT_EXCLUDES = (
    "node_modules",
    "__pycache__",
    ".git",
    "dist",
    "build",
    ".next",
    ".nuxt",
    "venv",
    ".venv",
    "env",
    ".env",
    "*.pyc",
    "*.pyo",
    "*.pyd",
    ".pytest_cache",
    ".mypy_cache",
    ".coverage",
    "htmlcov",
    ".tox",
    ".eggs",
    "*.egg-info",
    ".DS_Store",
    "Thumbs.db",
    "*.log",
    ".idea",
    ".vscode",
    ".cursor",
    "coverage",
    ".nyc_output",
    ".cache",
    "tmp",
    "temp",
    ".tmp",
    ".temp",
    "out",
    ".out",
    "target",
    ".gradle",
    ".class",
    "*.class",
    ".sass-cache",
    ".parcel-cache",
    ".turbo",
    ".vercel",
    ".netlify",
)

# Never descended into while looking for nested .gitignore files.
TRAVERSAL_SKIP_DIRS = frozenset({".git", "node_modules"})

GITIGNORE_FILENAME = ".gitignore"
