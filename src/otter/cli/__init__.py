"""
Otter Command-Line Interface
============================

This package provides the command-line tools for the Otter toolchain:

- **otterc**: front-end driver (source -> tokens, AST, IR)

Each tool is implemented as a Click-based CLI application.
"""

__all__ = ["otterc"]
