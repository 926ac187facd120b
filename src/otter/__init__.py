"""
Otter - Front-End Toolchain for the Otter Language
==================================================

Otter is a small statically-typed procedural language. This package turns
Otter source files (.otter) into a textual intermediate representation
resembling LLVM IR.

Main Components
---------------
- **frontend**: lexer, parser, AST and IR generator
- **cli**: the ``otterc`` command-line driver

Quick Start
-----------
    >>> from otter import compile_otter
    >>> print(compile_otter('function main(): i32 { printf("hi"); }'))

Or use the command-line tool:
    $ otterc examples/hello_world.otter -o out
"""

__version__ = "0.1.0"

from otter.errors import OtterError, Position
from otter.frontend import (
    OtterCompiler,
    CompilerOptions,
    compile_otter,
    OtterCompileError,
    OtterSyntaxError,
    UnsupportedFeatureError,
)

__all__ = [
    "__version__",
    "OtterError",
    "Position",
    "OtterCompiler",
    "CompilerOptions",
    "compile_otter",
    "OtterCompileError",
    "OtterSyntaxError",
    "UnsupportedFeatureError",
]
