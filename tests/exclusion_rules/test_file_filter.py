"""Unit tests for the FileFilter exclusion engine."""

import os
from unittest.mock import patch

import pytest

from zipit.exclusion_rules.defaults import DEFAULT_EXCLUDES
from zipit.exclusion_rules.file_filter import FileFilter, FilterConfiguration, to_relative_path
from zipit.types import RuleSource


@pytest.mark.parametrize(
    "path,root,expected",
    [
        ("/work/app/src/main.py", "/work/app", "src/main.py"),
        ("/work/app", "/work/app", ""),
        ("/work/app/", "/work/app", ""),
        ("src\\lib\\util.py", None, "src/lib/util.py"),
        ("./docs/index.md", None, "docs/index.md"),
        ("/leading/slash.txt", None, "leading/slash.txt"),
        (".", None, ""),
    ],
)
def test_to_relative_path(path, root, expected):
    assert to_relative_path(path, root) == expected


def test_default_excludes_is_immutable_and_complete():
    assert isinstance(DEFAULT_EXCLUDES, tuple)
    assert len(DEFAULT_EXCLUDES) == 45
    assert len(set(DEFAULT_EXCLUDES)) == 45
    for name in ("node_modules", "__pycache__", ".git", "*.egg-info", ".netlify"):
        assert name in DEFAULT_EXCLUDES


@pytest.mark.parametrize(
    "path",
    [
        "node_modules/react/index.js",
        "web/node_modules/react/index.js",
        "a/b/c/__pycache__/mod.cpython-312.pyc",
        "packages/api/dist/index.js",
        "pkg/module.pyc",
        "deep/nested/server.log",
        "tools/.venv/bin/python",
        "src/.DS_Store",
        "lib/foo.egg-info/PKG-INFO",
        ".git/config",
    ],
)
def test_defaults_apply_at_every_depth(path):
    assert FileFilter().is_excluded(path)


@pytest.mark.parametrize("path", ["src/app.ts", "README.md", "docs/building.md", "distribution/notes.txt", ".env.example"])
def test_regular_sources_are_included(path):
    assert FileFilter().is_included(path)


def test_default_rules_are_tagged():
    file_filter = FileFilter(custom_excludes=["fixtures"])
    sources = [rule.source for rule in file_filter.rules.rules]
    assert sources.count(RuleSource.DEFAULT) == len(DEFAULT_EXCLUDES)
    assert sources[-1] is RuleSource.USER
    assert file_filter.rules.rules[-1].pattern == "**/fixtures"


def test_include_rescues_matched_paths():
    file_filter = FileFilter(custom_includes=["keep"])
    assert file_filter.is_included("dist/keep.js")
    assert file_filter.is_excluded("dist/other.js")
    assert file_filter.is_included("src/app.ts")


def test_include_does_not_override_substring_excludes():
    file_filter = FileFilter(custom_excludes=["secrets"], custom_includes=["secrets"])
    assert file_filter.is_excluded("config/secrets.json")


def test_user_exclude_substring_channel():
    file_filter = FileFilter(custom_excludes=["secrets"])
    assert file_filter.is_excluded("config/secrets.json")
    assert file_filter.is_excluded("secrets/api.key")
    assert file_filter.is_included("config/settings.json")


def test_user_exclude_glob_channel():
    file_filter = FileFilter(custom_excludes=["*.snap"])
    assert file_filter.is_excluded("src/__tests__/app.test.ts.snap")
    assert file_filter.is_included("src/__tests__/app.test.ts")


def test_matcher_failure_falls_through_to_substrings():
    file_filter = FileFilter(custom_excludes=["secrets"])
    with patch.object(file_filter.rules, "exclude", side_effect=RuntimeError("matcher broke")):
        assert file_filter.is_included("dist/app.js")
        assert file_filter.is_excluded("config/secrets.json")


def test_directory_only_rules_need_is_dir():
    file_filter = FileFilter()
    file_filter.rules.add_rule("cache/")
    assert file_filter.is_excluded("cache", is_dir=True)
    assert file_filter.is_included("cache")
    assert file_filter.is_excluded("cache/data.bin")


def test_root_itself_is_never_excluded(tmp_path):
    file_filter = FileFilter(custom_excludes=[tmp_path.name])
    assert file_filter.is_included(tmp_path, tmp_path)


def test_absolute_paths_are_made_relative(tmp_path):
    file_filter = FileFilter()
    assert file_filter.is_excluded(tmp_path / "node_modules" / "x.js", tmp_path)
    assert file_filter.is_included(tmp_path / "src" / "x.js", tmp_path)


def test_filter_configuration_from_options():
    config = FilterConfiguration.from_options(["a", "b"], None)
    assert config == FilterConfiguration(("a", "b"), ())
    assert FilterConfiguration.from_options() == FilterConfiguration()


def test_root_gitignore(make_project):
    root = make_project({".gitignore": "*.secret\n!public.secret\n", "a.secret": "", "public.secret": ""})
    file_filter = FileFilter.for_project(root)
    assert file_filter.is_excluded("a.secret")
    assert file_filter.is_excluded("nested/a.secret")
    assert file_filter.is_included("public.secret")
    assert all(rule.source is RuleSource.GITIGNORE for rule in file_filter.rules.rules[-2:])


def test_gitignore_negation_overrides_default(make_project):
    root = make_project({".gitignore": "!important.log\n"})
    file_filter = FileFilter.for_project(root)
    assert file_filter.is_included("important.log")
    assert file_filter.is_included("logs/important.log")
    assert file_filter.is_excluded("debug.log")


@pytest.mark.parametrize(
    "gitignore,path",
    [
        ("build/\n!build/keep.js\n", "build/keep.js"),
        ("build/\n!build/keep.js\n", "build/sub/keep.js"),
        ("!dist/keep.js\n", "dist/keep.js"),
    ],
)
def test_negation_cannot_reinclude_below_excluded_directory(make_project, gitignore, path):
    root = make_project({".gitignore": gitignore})
    assert FileFilter.for_project(root).is_excluded(path)


def test_include_still_rescues_below_excluded_directory(make_project):
    root = make_project({".gitignore": "build/\n"})
    file_filter = FileFilter.for_project(root, FilterConfiguration.from_options(includes=["keep"]))
    assert file_filter.is_included("build/keep.js")
    assert file_filter.is_excluded("build/out.js")


def test_nested_gitignore_is_scoped(make_project):
    root = make_project({"pkg/.gitignore": "*.tmp\n/only-here.txt\n", "pkg/x.tmp": "", "other/x.tmp": ""})
    file_filter = FileFilter.for_project(root)
    assert file_filter.is_excluded("pkg/x.tmp")
    assert file_filter.is_excluded("pkg/sub/x.tmp")
    assert file_filter.is_included("other/x.tmp")
    assert file_filter.is_included("x.tmp")
    assert file_filter.is_excluded("pkg/only-here.txt")
    assert file_filter.is_included("pkg/sub/only-here.txt")


def test_excluded_directories_are_not_searched(make_project):
    root = make_project(
        {
            "dist/.gitignore": "*.ts\n",
            "node_modules/lib/.gitignore": "*.ts\n",
            "ignored/.gitignore": "*.ts\n",
            ".gitignore": "ignored/\n",
            "src/a.ts": "",
        }
    )
    file_filter = FileFilter.for_project(root)
    patterns = [rule.pattern for rule in file_filter.rules.rules if rule.source is RuleSource.GITIGNORE]
    assert patterns == ["ignored/"]
    assert file_filter.is_included("src/a.ts")


def test_directories_excluded_by_parent_gitignore_are_skipped(make_project):
    root = make_project({".gitignore": "vendor\n", "vendor/.gitignore": "*.py\n", "app.py": ""})
    file_filter = FileFilter.for_project(root)
    assert not any(rule.pattern.startswith("/vendor/") for rule in file_filter.rules.rules)
    assert file_filter.is_included("app.py")


def test_unreadable_gitignore_is_skipped(make_project):
    root = make_project({".gitignore": "*.bak\n", "sub/keep.txt": ""})
    (root / "sub" / ".gitignore").write_bytes(b"\xff\xfe\x00*.txt\n")
    file_filter = FileFilter.for_project(root)
    assert file_filter.is_excluded("a.bak")
    assert file_filter.is_included("sub/keep.txt")


@pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks not supported")
def test_gitignore_traversal_terminates_on_cycles(make_project):
    root = make_project({"src/.gitignore": "*.gen\n"})
    try:
        os.symlink(root, root / "src" / "loop")
    except (OSError, NotImplementedError):
        pytest.skip("cannot create symlinks")

    file_filter = FileFilter.for_project(root)
    assert file_filter.is_excluded("src/x.gen")
    gitignore_rules = [rule for rule in file_filter.rules.rules if rule.source is RuleSource.GITIGNORE]
    assert len(gitignore_rules) == 1


@pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks not supported")
def test_symlinked_directory_does_not_capture_nested_gitignore(make_project):
    root = make_project({"src/.gitignore": "*.gen\n"})
    try:
        # "linked" sorts before "src" and points at the same directory
        os.symlink(root / "src", root / "linked")
    except (OSError, NotImplementedError):
        pytest.skip("cannot create symlinks")

    file_filter = FileFilter.for_project(root)
    patterns = [rule.pattern for rule in file_filter.rules.rules if rule.source is RuleSource.GITIGNORE]
    assert patterns == ["/src/**/*.gen"]
    assert file_filter.is_excluded("src/x.gen")
    assert file_filter.is_excluded("src/deep/x.gen")


def test_load_gitignore_is_idempotent_per_run(make_project):
    root = make_project({"pkg/.gitignore": "*.tmp\n"})
    first = FileFilter.for_project(root)
    second = FileFilter.for_project(root)
    assert [r.pattern for r in first.rules.rules] == [r.pattern for r in second.rules.rules]
