"""Directory tree representation filtered through the project's exclusion rules.

This package provides the classes that walk a project directory and render it as
an indented tree listing for the text dump.
"""
