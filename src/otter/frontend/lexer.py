"""
Otter Lexer (Tokenizer)
=======================

This module implements the lexer for the Otter language. It converts
source text into a list of positioned tokens for the parser.

Token Categories
----------------
- Keywords: function, return, let, const, if, while, import, ...
- Identifiers: function, argument and type names
- Literals: "strings", 'c'haracters, numbers, true/false, null
- Brackets: ( ) { } [ ] < >
- Operators: arithmetic, bitwise, logical, comparison, compound
  assignment, increment/decrement
- Punctuation: ; , . : ? *

Numeric Literals
----------------
The numeric scanner is permissive. It accepts decimal text with an
optional fraction and a single exponent, plus 0x/0b prefixed integers:

| Format      | Example   |
|-------------|-----------|
| Decimal     | 42, 4.2   |
| Exponent    | 1e5, 2e-3 |
| Hexadecimal | 0x1F      |
| Binary      | 0b1010    |

The literal text is kept as the token value; it is not converted.

Comments
--------
- Single-line: // comment (must be followed by a newline)
- Multi-line: /* comment */

Comments are discarded and never appear in the token list.

Example Usage
-------------
>>> from otter.frontend.lexer import lex
>>> for token in lex('function main(): i32 { }'):
...     print(token)
Token(FUNCTION, 'function', 1:0)
Token(IDENTIFIER, 'main', 1:9)
Token(OPEN_PAREN, 1:13)
Token(CLOSE_PAREN, 1:14)
Token(COLON, 1:15)
Token(IDENTIFIER, 'i32', 1:17)
Token(OPEN_CURLY, 1:21)
Token(CLOSE_CURLY, 1:23)
Token(EOF, 1:24)
"""

import logging
import string
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from otter.errors import Position
from otter.frontend.errors import (
    InvalidCharacterError,
    InvalidCharacterLiteralError,
    InvalidEscapeError,
    MalformedNumberError,
    UnexpectedCommentEndError,
    UnterminatedCommentError,
    UnterminatedStringError,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Token Type Enumeration
# =============================================================================

class TokenType(Enum):
    """
    Token types for the Otter language.

    Keywords are distinguished from identifiers to simplify parsing. The
    enum value is the name used in serialised token lists.
    """

    # === Keywords - Declarations ===
    FUNCTION = "FUNCTION"                   # function
    OVERLOAD = "OVERLOAD"                   # overload
    ENUM = "ENUM"                           # enum
    STRUCT = "STRUCT"                       # struct
    RETURN = "RETURN"                       # return
    CONST = "CONST"                         # const
    LET = "LET"                             # let
    UNSAFE = "UNSAFE"                       # unsafe
    DECLARE = "DECLARE"                     # declare

    # === Keywords - Control Flow ===
    IF = "IF"                               # if
    ELSE = "ELSE"                           # else
    FOR = "FOR"                             # for
    WHILE = "WHILE"                         # while
    CONTINUE = "CONTINUE"                   # continue
    BREAK = "BREAK"                         # break

    # === Keywords - Modules ===
    IMPORT = "IMPORT"                       # import
    FROM = "FROM"                           # from
    EXPORT = "EXPORT"                       # export
    MODULE = "MODULE"                       # module

    # === Identifiers and Literals ===
    IDENTIFIER = "IDENTIFIER"
    STRING_LITERAL = "STRING_LITERAL"       # "..."
    CHARACTER_LITERAL = "CHARACTER_LITERAL" # '.'
    NUMERIC_LITERAL = "NUMERIC_LITERAL"     # 42, 1.5e3, 0x1F
    BOOLEAN_LITERAL = "BOOLEAN_LITERAL"     # true, false
    NULL_LITERAL = "NULL_LITERAL"           # null

    # === Brackets ===
    OPEN_PAREN = "OPEN_PAREN"               # (
    CLOSE_PAREN = "CLOSE_PAREN"             # )
    OPEN_CURLY = "OPEN_CURLY"               # {
    CLOSE_CURLY = "CLOSE_CURLY"             # }
    OPEN_SQUARE = "OPEN_SQUARE"             # [
    CLOSE_SQUARE = "CLOSE_SQUARE"           # ]
    OPEN_POINTY = "OPEN_POINTY"             # <
    CLOSE_POINTY = "CLOSE_POINTY"           # >

    # === Punctuation ===
    SEMI = "SEMI"                           # ;
    COMMA = "COMMA"                         # ,
    DOT = "DOT"                             # .
    COLON = "COLON"                         # :
    QUESTION_MARK = "QUESTION_MARK"         # ?
    ASTERISK = "ASTERISK"                   # * (multiply or pointer)

    # === Arithmetic Operators ===
    ADD = "ADD"                             # +
    SUBTRACT = "SUBTRACT"                   # -
    POWER = "POWER"                         # **
    DIVIDE = "DIVIDE"                       # /
    MODULO = "MODULO"                       # %

    # === Assignment Operators ===
    ASSIGN = "ASSIGN"                       # =
    ASSIGN_ADD = "ASSIGN_ADD"               # +=
    ASSIGN_SUBTRACT = "ASSIGN_SUBTRACT"     # -=
    ASSIGN_MULTIPLY = "ASSIGN_MULTIPLY"     # *=
    ASSIGN_DIVIDE = "ASSIGN_DIVIDE"         # /=
    ASSIGN_MODULO = "ASSIGN_MODULO"         # %=
    ASSIGN_SPACESHIP = "ASSIGN_SPACESHIP"   # <>
    ASSIGN_LOGIC_AND = "ASSIGN_LOGIC_AND"   # &=
    ASSIGN_LOGIC_OR = "ASSIGN_LOGIC_OR"     # |=
    ASSIGN_LOGIC_XOR = "ASSIGN_LOGIC_XOR"   # ^=
    ASSIGN_LOGIC_L_SHIFT = "ASSIGN_LOGIC_L_SHIFT"  # <<=
    ASSIGN_LOGIC_R_SHIFT = "ASSIGN_LOGIC_R_SHIFT"  # >>=

    # === Increment/Decrement ===
    INCREASE = "INCREASE"                   # ++
    DECREASE = "DECREASE"                   # --

    # === Comparison Operators ===
    EQUALS = "EQUALS"                       # ==
    EQUALS_OR_GREATER = "EQUALS_OR_GREATER" # >=
    EQUALS_OR_LESS = "EQUALS_OR_LESS"       # <=
    NOT_EQUALS = "NOT_EQUALS"               # !=

    # === Logical Operators ===
    AND = "AND"                             # &&
    OR = "OR"                               # ||

    # === Bitwise Operators ===
    LOGIC_AND = "LOGIC_AND"                 # &
    LOGIC_OR = "LOGIC_OR"                   # |
    LOGIC_XOR = "LOGIC_XOR"                 # ^
    LOGIC_NOT = "LOGIC_NOT"                 # !
    LOGIC_L_SHIFT = "LOGIC_L_SHIFT"         # <<
    LOGIC_R_SHIFT = "LOGIC_R_SHIFT"         # >>

    # === Structural ===
    COMMENT = "COMMENT"                     # reserved, comments are discarded
    EOF = "EOF"                             # End of file


# =============================================================================
# Keyword Mapping
# =============================================================================

KEYWORDS: dict[str, TokenType] = {
    # Declarations
    "function": TokenType.FUNCTION,
    "overload": TokenType.OVERLOAD,
    "enum": TokenType.ENUM,
    "struct": TokenType.STRUCT,
    "return": TokenType.RETURN,
    "const": TokenType.CONST,
    "let": TokenType.LET,
    "unsafe": TokenType.UNSAFE,
    "declare": TokenType.DECLARE,

    # Control flow
    "if": TokenType.IF,
    "else": TokenType.ELSE,
    "for": TokenType.FOR,
    "while": TokenType.WHILE,
    "continue": TokenType.CONTINUE,
    "break": TokenType.BREAK,

    # Modules
    "import": TokenType.IMPORT,
    "from": TokenType.FROM,
    "export": TokenType.EXPORT,
    "module": TokenType.MODULE,

    # Literal keywords
    "null": TokenType.NULL_LITERAL,
    "true": TokenType.BOOLEAN_LITERAL,
    "false": TokenType.BOOLEAN_LITERAL,
}


# =============================================================================
# Token Data Class
# =============================================================================

@dataclass(frozen=True)
class Token:
    """
    A single token of Otter source.

    Attributes:
        type: The TokenType classification
        value: Identifier, keyword or literal text; empty for punctuation
               and operators whose meaning is carried by the type
        start: Position of the first character of the token
        end: Position just past the last character of the token
    """
    type: TokenType
    value: str
    start: Position
    end: Position

    def __repr__(self) -> str:
        """Format token for debugging output."""
        if self.value:
            return f"Token({self.type.name}, {self.value!r}, {self.start})"
        return f"Token({self.type.name}, {self.start})"

    def to_dict(self) -> dict:
        """Return a JSON-serialisable mapping of this token."""
        return {
            "type": self.type.value,
            "value": self.value,
            "start": self.start.to_dict(),
            "end": self.end.to_dict(),
        }


# =============================================================================
# Lexer Implementation
# =============================================================================

class Lexer:
    """
    Tokenizes Otter source code.

    Every malformed input raises immediately; there is no error recovery
    and no partial token list.

    Usage:
        lexer = Lexer(source_text, filename)
        tokens = lexer.lex()

    Attributes:
        source: The source code being tokenized
        filename: Name of the source file (for error reporting)
    """

    IDENT_START = string.ascii_letters + "_"
    IDENT_CHARS = string.ascii_letters + string.digits + "_"

    WHITESPACE = " \t\r\n"
    BRACKETS = "(){}[]<>"
    SPECIAL_CHARACTERS = "+-=.,*/%&|^:;?!'"

    ESCAPE_SEQUENCES = {
        '"': '"',
        "n": chr(10),
        "r": chr(13),
    }

    SINGLE_BRACKETS = {
        "(": TokenType.OPEN_PAREN,
        ")": TokenType.CLOSE_PAREN,
        "[": TokenType.OPEN_SQUARE,
        "]": TokenType.CLOSE_SQUARE,
        "{": TokenType.OPEN_CURLY,
        "}": TokenType.CLOSE_CURLY,
    }

    PUNCTUATION = {
        ":": TokenType.COLON,
        ";": TokenType.SEMI,
        ",": TokenType.COMMA,
        ".": TokenType.DOT,
        "?": TokenType.QUESTION_MARK,
    }

    # Operators whose second character selects a longer token:
    # first char -> (single token, {second char: double token})
    OPERATORS = {
        "+": (TokenType.ADD, {"=": TokenType.ASSIGN_ADD, "+": TokenType.INCREASE}),
        "-": (TokenType.SUBTRACT, {"=": TokenType.ASSIGN_SUBTRACT, "-": TokenType.DECREASE}),
        "*": (TokenType.ASTERISK, {"=": TokenType.ASSIGN_MULTIPLY, "*": TokenType.POWER}),
        "%": (TokenType.MODULO, {"=": TokenType.ASSIGN_MODULO}),
        "&": (TokenType.LOGIC_AND, {"&": TokenType.AND, "=": TokenType.ASSIGN_LOGIC_AND}),
        "|": (TokenType.LOGIC_OR, {"|": TokenType.OR, "=": TokenType.ASSIGN_LOGIC_OR}),
        "^": (TokenType.LOGIC_XOR, {"=": TokenType.ASSIGN_LOGIC_XOR}),
        "!": (TokenType.LOGIC_NOT, {"=": TokenType.NOT_EQUALS}),
        "=": (TokenType.ASSIGN, {"=": TokenType.EQUALS}),
    }

    def __init__(self, source: str, filename: str = "<input>"):
        """
        Initialize the lexer with source code.

        Args:
            source: The Otter source code to tokenize
            filename: Name of the source file (for error messages)
        """
        self.source = source
        self.filename = filename

        self._index = 0
        self._line = 1
        self._column = 0
        self._line_start = 0
        self._tokens: list[Token] = []

    def lex(self) -> list[Token]:
        """
        Tokenize the whole source.

        Returns:
            List of tokens, always terminated by a single EOF token

        Raises:
            LexError: If malformed input is encountered
        """
        self._index = 0
        self._line = 1
        self._column = 0
        self._line_start = 0
        self._tokens = []

        while not self._at_end():
            self._skip_whitespace()
            if self._at_end():
                break

            token = self._scan_token()
            if token is not None:
                self._tokens.append(token)

        eof_position = self._position()
        self._tokens.append(Token(TokenType.EOF, "", eof_position, eof_position))

        logger.debug(f"Lexed {self.filename}: {len(self._tokens)} tokens")
        return self._tokens

    # =========================================================================
    # Character Access Methods
    # =========================================================================

    def _at_end(self) -> bool:
        return self._index >= len(self.source)

    def _peek(self, offset: int = 0) -> str:
        """
        Look at character at current position + offset without advancing.

        Returns empty string if past end of source.
        """
        index = self._index + offset
        if index >= len(self.source):
            return ""
        return self.source[index]

    def _advance(self) -> str:
        """Consume and return the current character, tracking line and column."""
        if self._at_end():
            return ""

        char = self.source[self._index]
        self._index += 1

        if char == "\n":
            self._line += 1
            self._column = 0
            self._line_start = self._index
        else:
            self._column += 1

        return char

    def _match(self, expected: str) -> bool:
        """Consume next character if it matches expected."""
        if self._peek() == expected:
            self._advance()
            return True
        return False

    def _position(self) -> Position:
        return Position(self._line, self._column, self._index)

    def _current_line(self) -> str:
        """Get the current line of source text for error reporting."""
        line_end = self.source.find("\n", self._line_start)
        if line_end == -1:
            line_end = len(self.source)
        return self.source[self._line_start:line_end]

    def _make_token(self, token_type: TokenType, value: str, start: Position) -> Token:
        return Token(token_type, value, start, self._position())

    # =========================================================================
    # Whitespace and Comment Handling
    # =========================================================================

    def _skip_whitespace(self) -> None:
        while not self._at_end() and self._peek() in self.WHITESPACE:
            self._advance()

    def _skip_line_comment(self, start: Position, source_line: str) -> None:
        """Skip the rest of a // comment, leaving the newline in place."""
        while self._peek() != "\n":
            if self._at_end():
                raise UnterminatedCommentError(
                    "a newline", start, self.filename, source_line
                )
            self._advance()

    def _skip_block_comment(self, start: Position, source_line: str) -> None:
        """Skip a /* ... */ comment including the closing */."""
        while not (self._peek() == "*" and self._peek(1) == "/"):
            if self._at_end():
                raise UnterminatedCommentError(
                    "'*/'", start, self.filename, source_line
                )
            self._advance()
        self._advance()
        self._advance()

    # =========================================================================
    # Token Scanning
    # =========================================================================

    def _scan_token(self) -> Optional[Token]:
        """
        Scan the next token from source.

        Returns:
            The next Token, or None when a comment was skipped
        """
        char = self._peek()

        if char in self.IDENT_START:
            return self._scan_identifier()

        if char == '"':
            return self._scan_string()

        if char in self.BRACKETS:
            return self._scan_bracket()

        if char in self.SPECIAL_CHARACTERS:
            return self._scan_special_character()

        if char in string.digits:
            return self._scan_number()

        raise InvalidCharacterError(
            char, self._position(), self.filename, self._current_line()
        )

    def _scan_identifier(self) -> Token:
        """
        Scan an identifier or keyword.

        Identifiers start with a letter or underscore and continue with
        letters, digits and underscores.
        """
        start = self._position()
        chars = []
        while self._peek() and self._peek() in self.IDENT_CHARS:
            chars.append(self._advance())

        name = "".join(chars)
        return self._make_token(KEYWORDS.get(name, TokenType.IDENTIFIER), name, start)

    def _scan_string(self) -> Token:
        """
        Scan a double-quoted string literal.

        Supports the escape sequences \\", \\n and \\r.
        """
        start = self._position()
        source_line = self._current_line()
        self._advance()  # consume opening "

        chars = []
        while not self._at_end():
            char = self._peek()

            if char == '"':
                self._advance()
                return self._make_token(TokenType.STRING_LITERAL, "".join(chars), start)

            if char == "\\":
                escape_position = self._position()
                self._advance()
                if self._at_end():
                    raise UnterminatedStringError(start, self.filename, source_line)
                escaped = self._peek()
                if escaped not in self.ESCAPE_SEQUENCES:
                    raise InvalidEscapeError(
                        escaped, escape_position, self.filename, self._current_line()
                    )
                self._advance()
                chars.append(self.ESCAPE_SEQUENCES[escaped])
            else:
                chars.append(self._advance())

        raise UnterminatedStringError(start, self.filename, source_line)

    def _scan_bracket(self) -> Token:
        """
        Scan a bracket, resolving '<' and '>' against longer operators.

        '<' may start '<=', '<<', '<<=' or the spaceship-assign '<>';
        '>' may start '>=', '>>' or '>>='.
        """
        start = self._position()
        char = self._advance()

        if char in self.SINGLE_BRACKETS:
            return self._make_token(self.SINGLE_BRACKETS[char], "", start)

        if char == "<":
            if self._match(">"):
                return self._make_token(TokenType.ASSIGN_SPACESHIP, "", start)
            if self._match("<"):
                if self._match("="):
                    return self._make_token(TokenType.ASSIGN_LOGIC_L_SHIFT, "", start)
                return self._make_token(TokenType.LOGIC_L_SHIFT, "", start)
            if self._match("="):
                return self._make_token(TokenType.EQUALS_OR_LESS, "", start)
            return self._make_token(TokenType.OPEN_POINTY, "", start)

        # char == ">"
        if self._match(">"):
            if self._match("="):
                return self._make_token(TokenType.ASSIGN_LOGIC_R_SHIFT, "", start)
            return self._make_token(TokenType.LOGIC_R_SHIFT, "", start)
        if self._match("="):
            return self._make_token(TokenType.EQUALS_OR_GREATER, "", start)
        return self._make_token(TokenType.CLOSE_POINTY, "", start)

    def _scan_special_character(self) -> Optional[Token]:
        """
        Scan an operator, punctuation mark, comment or character literal.

        Returns None after skipping a comment.
        """
        start = self._position()
        source_line = self._current_line()
        char = self._advance()

        if char == "/":
            if self._match("/"):
                self._skip_line_comment(start, source_line)
                return None
            if self._match("*"):
                self._skip_block_comment(start, source_line)
                return None
            if self._match("="):
                return self._make_token(TokenType.ASSIGN_DIVIDE, "", start)
            return self._make_token(TokenType.DIVIDE, "", start)

        if char == "*" and self._peek() == "/":
            raise UnexpectedCommentEndError(start, self.filename, source_line)

        if char == "'":
            return self._scan_character_literal(start, source_line)

        if char in self.PUNCTUATION:
            return self._make_token(self.PUNCTUATION[char], "", start)

        single, doubles = self.OPERATORS[char]
        following = self._peek()
        if following and following in doubles:
            self._advance()
            return self._make_token(doubles[following], "", start)
        return self._make_token(single, "", start)

    def _scan_character_literal(self, start: Position, source_line: str) -> Token:
        """Scan the rest of a 'x' literal after its opening quote."""
        if self._at_end() or self._peek() == "'":
            raise InvalidCharacterLiteralError(start, self.filename, source_line)

        char = self._advance()
        if not self._match("'"):
            raise InvalidCharacterLiteralError(start, self.filename, source_line)

        return self._make_token(TokenType.CHARACTER_LITERAL, char, start)

    def _scan_number(self) -> Token:
        """
        Scan a numeric literal.

        Handles:
        - Decimal with fraction and one exponent: 12, 1.5, 2e10, 3e-4
        - Hexadecimal: 0x1F
        - Binary: 0b1010
        """
        start = self._position()

        if self._peek() == "0" and self._peek(1) in ("x", "b"):
            return self._scan_prefixed_number(start)

        chars = []
        had_exponent = False
        while not self._at_end():
            char = self._peek()

            if char in string.digits or char == ".":
                pass
            elif char == "e":
                if had_exponent:
                    raise MalformedNumberError(
                        "numeric literal can only contain exactly one 'e'",
                        self._position(),
                        self.filename,
                        source_line=self._current_line(),
                    )
                had_exponent = True
            elif char in "+-":
                # A sign only belongs to the literal directly after 'e'
                if not chars or chars[-1] != "e":
                    break
            elif char in "bx":
                raise MalformedNumberError(
                    f"unexpected character '{char}' in numeric literal",
                    self._position(),
                    self.filename,
                    hint=f"'{char}' is only valid directly after a leading '0'",
                    source_line=self._current_line(),
                )
            else:
                break

            chars.append(self._advance())

        return self._make_token(TokenType.NUMERIC_LITERAL, "".join(chars), start)

    def _scan_prefixed_number(self, start: Position) -> Token:
        """Scan a 0x or 0b literal."""
        chars = [self._advance(), self._advance()]
        prefix = chars[1]
        digits = string.hexdigits if prefix == "x" else "01"

        while self._peek() and self._peek() in string.hexdigits:
            if self._peek() not in digits:
                raise MalformedNumberError(
                    f"unexpected digit '{self._peek()}' in binary literal",
                    self._position(),
                    self.filename,
                    source_line=self._current_line(),
                )
            chars.append(self._advance())

        if len(chars) == 2:
            kind = "hexadecimal" if prefix == "x" else "binary"
            raise MalformedNumberError(
                f"expected {kind} digits after '0{prefix}'",
                self._position(),
                self.filename,
                source_line=self._current_line(),
            )

        return self._make_token(TokenType.NUMERIC_LITERAL, "".join(chars), start)


# =============================================================================
# Convenience Functions
# =============================================================================

def lex(source: str, filename: str = "<input>") -> list[Token]:
    """
    Tokenize Otter source with a fresh Lexer.

    Args:
        source: Otter source code
        filename: Source filename for error messages

    Returns:
        List of tokens terminated by EOF

    Raises:
        LexError: If the source is malformed
    """
    return Lexer(source, filename).lex()
