# docs_walker/__init__.py
"""
DocsWalker package initializer.
Defines package version and exposes CLI.
"""
__version__ = "0.1.0"

# Expose CLI entry point
from docs_walker.cli import cli  # noqa: E402
