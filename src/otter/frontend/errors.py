"""
Otter Front-End Error Hierarchy
===============================

This module defines the exception hierarchy for the Otter front end
(lexer, parser and IR generator). All exceptions inherit from
OtterCompileError, which itself inherits from the base OtterError for
consistent error handling across the toolchain.

Every error is fatal: the stage that raises it aborts immediately and
no partial token list, AST or IR is produced.

Exception Hierarchy
-------------------
OtterCompileError (base for all front-end errors)
├── OtterSyntaxError - malformed source text
│   ├── LexError - lexical analysis failures
│   │   ├── InvalidCharacterError - character outside the language
│   │   ├── InvalidEscapeError - unknown escape in a string literal
│   │   ├── UnterminatedStringError - missing closing quote
│   │   ├── UnterminatedCommentError - comment runs into end of file
│   │   ├── UnexpectedCommentEndError - '*/' without an open comment
│   │   ├── MalformedNumberError - bad numeric literal
│   │   └── InvalidCharacterLiteralError - not exactly one character
│   └── ParseError - grammar violations
│       ├── UnexpectedTokenError - wrong token for the grammar position
│       ├── UnexpectedEndOfInputError - token list ended without EOF
│       ├── TopLevelStatementError - construct not allowed at top level
│       └── NestedFunctionError - function declared inside a function
├── UnsupportedFeatureError - construct recognised but not implemented
└── CodeGenError - IR generation failures

UnsupportedFeatureError is not an OtterSyntaxError: source
that uses an unimplemented feature is valid Otter, the toolchain simply
cannot handle it yet.

Error Message Format
--------------------
    hello.otter:3:4: error: unexpected token SEMI
        printf("hi";
                    ^
    hint: expected CLOSE_PAREN
"""

from typing import Optional

from otter.errors import OtterError, Position


# =============================================================================
# Base Front-End Exception
# =============================================================================

class OtterCompileError(OtterError):
    """
    Base exception for all front-end errors.

    Attributes:
        message: The error description
        position: Where in the source the error occurred
        filename: Name of the source file, when known
        hint: A suggestion for fixing the error
        source_line: The source text of the line containing the error
        token_type: Name of the offending token type, for parser errors
    """

    def __init__(
        self,
        message: str,
        position: Optional[Position] = None,
        filename: Optional[str] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
        token_type: Optional[str] = None,
    ):
        self.message = message
        self.position = position
        self.filename = filename
        self.hint = hint
        self.source_line = source_line
        self.token_type = token_type
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """
        Format the error message with position, source context, and hint.

            main.otter:1:16: error: unterminated string literal
                printf("hi);
                       ^
            hint: add closing '"' to complete the string
        """
        parts = []

        if self.position is not None:
            prefix = f"{self.filename}:{self.position}" if self.filename else f"line {self.position}"
            parts.append(f"{prefix}: error: {self.message}")
        else:
            parts.append(f"error: {self.message}")

        # Column is 0-indexed, so the caret sits directly under it
        if self.source_line is not None and self.position is not None:
            parts.append(f"    {self.source_line}")
            parts.append(" " * (4 + self.position.column) + "^")

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)


# =============================================================================
# Syntax Errors (Lexer and Parser)
# =============================================================================

class OtterSyntaxError(OtterCompileError):
    """
    Malformed Otter source.

    Raised when the lexer or parser encounters text that cannot be
    tokenized or parsed according to the Otter grammar.
    """
    pass


class LexError(OtterSyntaxError):
    """Source text cannot be split into tokens."""
    pass


class InvalidCharacterError(LexError):
    """
    Character that cannot start any token.

    Example:
        function main(): i32 { # }
    """

    def __init__(
        self,
        char: str,
        position: Optional[Position] = None,
        filename: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.char = char
        super().__init__(
            f"unrecognized character '{char}'",
            position=position,
            filename=filename,
            source_line=source_line,
        )


class InvalidEscapeError(LexError):
    """Escape sequence other than \\", \\n or \\r inside a string."""

    def __init__(
        self,
        sequence: str,
        position: Optional[Position] = None,
        filename: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.sequence = sequence
        super().__init__(
            f"unknown escape sequence '\\{sequence}' in string",
            position=position,
            filename=filename,
            hint="supported escapes are \\\", \\n and \\r",
            source_line=source_line,
        )


class UnterminatedStringError(LexError):
    """
    String literal not closed before the end of the file.

    Example:
        printf("hello);
    """

    def __init__(
        self,
        position: Optional[Position] = None,
        filename: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        super().__init__(
            "unterminated string literal",
            position=position,
            filename=filename,
            hint="add closing '\"' to complete the string",
            source_line=source_line,
        )


class UnterminatedCommentError(LexError):
    """Line or block comment that reaches the end of the file."""

    def __init__(
        self,
        terminator: str,
        position: Optional[Position] = None,
        filename: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.terminator = terminator
        super().__init__(
            "unterminated comment",
            position=position,
            filename=filename,
            hint=f"comment must be closed by {terminator}",
            source_line=source_line,
        )


class UnexpectedCommentEndError(LexError):
    """A '*/' sequence with no open block comment."""

    def __init__(
        self,
        position: Optional[Position] = None,
        filename: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        super().__init__(
            "unexpected end of multi line comment",
            position=position,
            filename=filename,
            source_line=source_line,
        )


class MalformedNumberError(LexError):
    """
    Numeric literal that breaks the literal scanning rules.

    Examples:
        1e2e3     (more than one exponent)
        12x4      ('x' not directly after a leading '0')
    """
    pass


class InvalidCharacterLiteralError(LexError):
    """Character literal that does not hold exactly one character."""

    def __init__(
        self,
        position: Optional[Position] = None,
        filename: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        super().__init__(
            "character literal must contain exactly one character",
            position=position,
            filename=filename,
            source_line=source_line,
        )


class ParseError(OtterSyntaxError):
    """Token sequence does not match the Otter grammar."""
    pass


class UnexpectedTokenError(ParseError):
    """
    Unexpected token during parsing.

    Raised when the parser encounters a token that doesn't match
    the expected grammar rule.
    """

    def __init__(
        self,
        found: str,
        expected: Optional[str] = None,
        position: Optional[Position] = None,
        filename: Optional[str] = None,
        source_line: Optional[str] = None,
        message: Optional[str] = None,
    ):
        self.found = found
        self.expected = expected

        hint = None
        if expected:
            hint = f"expected {expected}"

        super().__init__(
            message or f"unexpected token {found}",
            position=position,
            filename=filename,
            hint=hint,
            source_line=source_line,
            token_type=found,
        )


class UnexpectedEndOfInputError(ParseError):
    """
    The token list ran out before an EOF token was seen.

    This only happens when the parser is handed a token list that did
    not come from the lexer (which always appends EOF).
    """

    def __init__(self, filename: Optional[str] = None):
        super().__init__(
            "unexpected end of token stream, can not complete parsing",
            filename=filename,
            hint="token lists must be terminated by an EOF token",
        )


class TopLevelStatementError(ParseError):
    """Only function declarations are allowed at top level."""

    def __init__(
        self,
        found: str,
        position: Optional[Position] = None,
        filename: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.found = found
        super().__init__(
            f"token {found} is not allowed at top level",
            position=position,
            filename=filename,
            hint="only 'function' declarations may appear at top level",
            source_line=source_line,
            token_type=found,
        )


class NestedFunctionError(ParseError):
    """A 'function' keyword inside a function body."""

    def __init__(
        self,
        position: Optional[Position] = None,
        filename: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        super().__init__(
            "cannot declare nested function",
            position=position,
            filename=filename,
            hint="move the function declaration to top level",
            source_line=source_line,
            token_type="FUNCTION",
        )


# =============================================================================
# Unimplemented Features
# =============================================================================

class UnsupportedFeatureError(OtterCompileError):
    """
    Language construct that is recognised but not implemented yet.

    Examples:
        - variable assignment (x = 1;)
        - calls to functions other than printf
        - lowering binary expressions to IR
        - IR types for non-primitive type names
    """

    def __init__(
        self,
        feature: str,
        position: Optional[Position] = None,
        filename: Optional[str] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.feature = feature
        super().__init__(
            f"{feature} not implemented",
            position=position,
            filename=filename,
            hint=hint,
            source_line=source_line,
        )


# =============================================================================
# Code Generation Errors
# =============================================================================

class CodeGenError(OtterCompileError):
    """
    Error during IR generation.

    Raised when the generator is handed an AST node it has no lowering
    for, such as a statement kind that never appears at function level.
    """
    pass
