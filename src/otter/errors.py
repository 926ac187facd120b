"""
Otter Error Hierarchy
=====================

This module defines the root of the exception hierarchy for the Otter
toolchain together with the source position type shared by every stage.
All exceptions inherit from OtterError, allowing callers to catch every
toolchain error with a single except clause if desired.

Exception Hierarchy
-------------------
OtterError (base)
└── OtterCompileError (front-end errors, see otter.frontend.errors)
    ├── OtterSyntaxError - malformed source (lexer and parser)
    ├── UnsupportedFeatureError - recognised but unimplemented constructs
    └── CodeGenError - IR generation failures

Design Philosophy
-----------------
Each front-end exception captures the source position (line, column,
absolute index) where the problem was detected. Error messages follow
this format:

    filename:line:column: error: description
        source_line_text
        ^ (pointer to error location)
    hint: suggestion for fixing (when available)
"""

from dataclasses import dataclass


# =============================================================================
# Base Exception Class
# =============================================================================

class OtterError(Exception):
    """
    Base exception for all Otter toolchain errors.

    All exceptions in the toolchain inherit from this class, allowing
    callers to catch every toolchain error with a single except clause:

        try:
            ir = compile_otter(source)
        except OtterError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Source Position Tracking
# =============================================================================

@dataclass(frozen=True)
class Position:
    """
    A position in source text.

    Tokens record a start and an end position; AST nodes record the start
    position of the first token consumed to build them. The immutable
    (frozen) design ensures positions cannot be modified after a token
    has been created.

    Attributes:
        line: Line number (1-indexed)
        column: Column number (0-indexed, reset after every newline)
        index: Absolute character offset into the source (0-indexed)
    """
    line: int
    column: int
    index: int

    def __str__(self) -> str:
        """Format as 'line:column' for error messages."""
        return f"{self.line}:{self.column}"

    def to_dict(self) -> dict:
        """Return a JSON-serialisable mapping of this position."""
        return {"line": self.line, "column": self.column, "index": self.index}
