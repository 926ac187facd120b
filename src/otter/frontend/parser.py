"""
Otter Recursive Descent Parser
==============================

This module implements a recursive descent parser for the Otter
language. It takes the token list from the lexer and builds the list of
top-level statements (the AST).

Grammar (Simplified EBNF)
-------------------------
program          ::= top_level* EOF
top_level        ::= function
function         ::= 'function' IDENTIFIER '(' (argument (',' argument)*)? ')'
                     ':' type block
argument         ::= IDENTIFIER ':' type
type             ::= '*'? IDENTIFIER ('<' type '>')? ('[' ']')?

block            ::= '{' local_statement* '}'
local_statement  ::= expr_stmt | return_stmt
return_stmt      ::= 'return' expression ';'
expr_stmt        ::= IDENTIFIER '(' (expression (',' expression)*)? ')' ';'

expression       ::= STRING_LITERAL | numeric_expr
numeric_expr     ::= NUMERIC_LITERAL (binary_op NUMERIC_LITERAL)*

Functions are only reachable from the top-level rule, so a 'function'
keyword inside a block is rejected as a nested declaration.

Expression Precedence (lowest to highest)
-----------------------------------------
1.  equality        == !=
2.  relational      < > <= >=
3.  additive        + -
4.  multiplicative  * / %

Numeric expressions are parsed by precedence climbing: the right operand
of an operator is parsed with a minimum precedence one higher than the
operator's own, which makes chains of equal precedence left-associative.

Example Usage
-------------
>>> from otter.frontend.lexer import lex
>>> from otter.frontend.parser import parse
>>> statements = parse(lex('function main(): i32 { return 1 + 2 * 3; }'))
>>> statements[0].name
'main'
"""

import logging
from typing import Optional

from otter.errors import Position
from otter.frontend.lexer import Token, TokenType
from otter.frontend.types import TypeSignature, make_type
from otter.frontend.ast import (
    Argument,
    BinaryExpression,
    Block,
    Expression,
    ExpressionStatement,
    Function,
    FunctionCall,
    NumericLiteral,
    Return,
    Statement,
    StringLiteral,
)
from otter.frontend.errors import (
    NestedFunctionError,
    TopLevelStatementError,
    UnexpectedEndOfInputError,
    UnexpectedTokenError,
    UnsupportedFeatureError,
)

logger = logging.getLogger(__name__)


# Binary operator token -> (symbol, precedence)
BINARY_OPERATORS: dict[TokenType, tuple[str, int]] = {
    TokenType.EQUALS: ("==", 1),
    TokenType.NOT_EQUALS: ("!=", 1),
    TokenType.OPEN_POINTY: ("<", 2),
    TokenType.CLOSE_POINTY: (">", 2),
    TokenType.EQUALS_OR_LESS: ("<=", 2),
    TokenType.EQUALS_OR_GREATER: (">=", 2),
    TokenType.ADD: ("+", 3),
    TokenType.SUBTRACT: ("-", 3),
    TokenType.ASTERISK: ("*", 4),
    TokenType.DIVIDE: ("/", 4),
    TokenType.MODULO: ("%", 4),
}


class Parser:
    """
    Recursive descent parser for Otter.

    Consumes tokens strictly left to right with a single cursor and a
    single-token peek. Every grammar violation raises immediately with
    the line:column of the offending token; there is no error recovery.

    Attributes:
        tokens: List of tokens to parse
        filename: Source filename for error reporting
    """

    def __init__(
        self,
        tokens: list[Token],
        filename: str = "<input>",
        source_lines: Optional[list[str]] = None,
    ):
        """
        Initialize the parser.

        Args:
            tokens: List of tokens from the lexer
            filename: Source filename for error messages
            source_lines: Original source lines for error context
        """
        self.tokens = tokens
        self.filename = filename
        self.source_lines = source_lines or []

        self._index = 0

    def parse(self) -> list[Statement]:
        """
        Parse the token list into top-level statements.

        Returns:
            Top-level statements in source order

        Raises:
            OtterSyntaxError: If the tokens do not form a valid program
            UnsupportedFeatureError: For recognised but unimplemented constructs
        """
        self._index = 0
        statements: list[Statement] = []

        while (token := self._peek()) is not None and token.type != TokenType.EOF:
            statements.append(self._parse_top_level_statement())

        if self._peek() is None:
            raise UnexpectedEndOfInputError(self.filename)

        logger.debug(f"Parsed {self.filename}: {len(statements)} top-level statements")
        return statements

    # =========================================================================
    # Token Access Methods
    # =========================================================================

    def _peek(self) -> Optional[Token]:
        """Look at the current token, or None past the end of the list."""
        if self._index < len(self.tokens):
            return self.tokens[self._index]
        return None

    def _current(self) -> Token:
        """Return the current token, failing if the list ran out."""
        token = self._peek()
        if token is None:
            raise UnexpectedEndOfInputError(self.filename)
        return token

    def _check(self, token_type: TokenType) -> bool:
        token = self._peek()
        return token is not None and token.type == token_type

    def _consume(self, token_type: TokenType, expected: Optional[str] = None) -> Token:
        """
        Expect and consume a specific token type.

        Args:
            token_type: The expected token type
            expected: Description for the error hint (defaults to the type name)

        Returns:
            The consumed token

        Raises:
            UnexpectedEndOfInputError: If no token is left
            UnexpectedTokenError: If the current token has another type
        """
        token = self._current()
        if token.type != token_type:
            raise self._unexpected(token, expected or token_type.name)
        self._index += 1
        return token

    def _match(self, token_type: TokenType) -> bool:
        """Consume the current token if it has the given type."""
        if self._check(token_type):
            self._index += 1
            return True
        return False

    def _position(self) -> Position:
        return self._current().start

    def _source_line(self, token: Token) -> Optional[str]:
        """Get source line for error reporting."""
        if 0 < token.start.line <= len(self.source_lines):
            return self.source_lines[token.start.line - 1]
        return None

    def _unexpected(
        self,
        token: Token,
        expected: Optional[str] = None,
        message: Optional[str] = None,
    ) -> UnexpectedTokenError:
        return UnexpectedTokenError(
            token.type.name,
            expected=expected,
            position=token.start,
            filename=self.filename,
            source_line=self._source_line(token),
            message=message,
        )

    # =========================================================================
    # Top-Level Statement Parsing
    # =========================================================================

    def _parse_top_level_statement(self) -> Statement:
        token = self._current()
        if token.type == TokenType.FUNCTION:
            return self._parse_function()

        raise TopLevelStatementError(
            token.type.name, token.start, self.filename, self._source_line(token)
        )

    def _parse_function(self) -> Function:
        """
        Parse a function declaration.

            function name(arg: Type, ...): ReturnType { ... }
        """
        position = self._position()
        self._consume(TokenType.FUNCTION)
        name = self._consume(TokenType.IDENTIFIER, "function name").value
        self._consume(TokenType.OPEN_PAREN)

        arguments: list[Argument] = []
        if not self._check(TokenType.CLOSE_PAREN):
            arguments.append(self._parse_argument())
            while self._match(TokenType.COMMA):
                arguments.append(self._parse_argument())

        self._consume(TokenType.CLOSE_PAREN)
        self._consume(TokenType.COLON, "':' before the return type")
        return_type = self._parse_type()
        body = self._parse_block()

        logger.debug(f"Parsed function '{name}' with {len(arguments)} arguments")
        return Function(
            position,
            name=name,
            arguments=tuple(arguments),
            body=body,
            return_type=return_type,
        )

    def _parse_argument(self) -> Argument:
        name = self._consume(TokenType.IDENTIFIER, "argument name").value
        self._consume(TokenType.COLON, "':' before the argument type")
        return Argument(name=name, type=self._parse_type())

    def _parse_type(self) -> TypeSignature:
        """
        Parse a type signature.

        Pointer prefix, base name, optional generic parameter, optional
        array suffix, in that order.
        """
        is_pointer = self._match(TokenType.ASTERISK)
        type_name = self._consume(TokenType.IDENTIFIER, "type name").value

        generic_type = None
        if self._match(TokenType.OPEN_POINTY):
            generic_type = self._parse_type()
            self._consume(TokenType.CLOSE_POINTY, "'>' to close the generic parameter")

        is_array = self._match(TokenType.OPEN_SQUARE)
        if is_array:
            self._consume(TokenType.CLOSE_SQUARE, "']' to close the array type")

        return make_type(
            type_name,
            is_pointer=is_pointer,
            is_array=is_array,
            generic_type=generic_type,
        )

    # =========================================================================
    # Local Statement Parsing
    # =========================================================================

    def _parse_block(self) -> Block:
        position = self._position()
        opening = self._consume(TokenType.OPEN_CURLY, "'{' to open the block")

        body: list[Statement] = []
        while not self._check(TokenType.CLOSE_CURLY):
            token = self._current()
            if token.type == TokenType.EOF:
                raise self._unexpected(
                    token,
                    expected="'}'",
                    message=f"unexpected end of file, block opened at line {opening.start} is not closed",
                )
            body.append(self._parse_local_statement())

        self._consume(TokenType.CLOSE_CURLY)
        return Block(position, body=tuple(body))

    def _parse_local_statement(self) -> Statement:
        token = self._current()

        if token.type == TokenType.IDENTIFIER:
            return self._parse_identifier_statement()

        if token.type == TokenType.RETURN:
            return self._parse_return()

        if token.type == TokenType.FUNCTION:
            raise NestedFunctionError(token.start, self.filename, self._source_line(token))

        raise self._unexpected(
            token,
            expected="a function call or 'return'",
            message=f"unexpected token {token.type.name} for a statement",
        )

    def _parse_return(self) -> Return:
        position = self._position()
        self._consume(TokenType.RETURN)
        value = self._parse_expression()
        self._consume(TokenType.SEMI, "';' after the return value")
        return Return(position, value=value)

    def _parse_identifier_statement(self) -> ExpressionStatement:
        """
        Parse a statement starting with an identifier.

        Only call statements are supported; assignment is recognised but
        not implemented.
        """
        position = self._position()
        identifier = self._consume(TokenType.IDENTIFIER)

        if self._check(TokenType.ASSIGN):
            raise UnsupportedFeatureError(
                "variable assignment",
                position=self._position(),
                filename=self.filename,
                source_line=self._source_line(identifier),
            )

        if not self._match(TokenType.OPEN_PAREN):
            raise self._unexpected(
                self._current(),
                expected="'(' to call the function",
                message=f"found unused identifier '{identifier.value}'",
            )

        arguments: list[Expression] = []
        if not self._check(TokenType.CLOSE_PAREN):
            arguments.append(self._parse_expression())
            while self._match(TokenType.COMMA):
                arguments.append(self._parse_expression())

        self._consume(TokenType.CLOSE_PAREN)
        self._consume(TokenType.SEMI, "';' after the call")

        call = FunctionCall(position, function_name=identifier.value, arguments=tuple(arguments))
        return ExpressionStatement(position, expression=call)

    # =========================================================================
    # Expression Parsing
    # =========================================================================

    def _parse_expression(self) -> Expression:
        token = self._current()

        if token.type == TokenType.STRING_LITERAL:
            self._index += 1
            return StringLiteral(token.start, value=token.value)

        if token.type == TokenType.NUMERIC_LITERAL:
            return self._parse_binary(1)

        raise self._unexpected(
            token,
            expected="an expression",
            message=f"unexpected token {token.type.name} for expression",
        )

    def _parse_binary(self, min_precedence: int) -> Expression:
        """
        Parse a numeric expression by precedence climbing.

        Operators binding weaker than min_precedence are left for the
        caller, so `1 + 2 * 3` nests the product on the right while
        `1 - 2 - 3` groups to the left.
        """
        left: Expression = self._parse_numeric_literal()

        while True:
            token = self._peek()
            if token is None or token.type not in BINARY_OPERATORS:
                break
            operator, precedence = BINARY_OPERATORS[token.type]
            if precedence < min_precedence:
                break

            self._index += 1
            right = self._parse_binary(precedence + 1)
            left = BinaryExpression(left.position, left=left, right=right, operator=operator)

        return left

    def _parse_numeric_literal(self) -> NumericLiteral:
        token = self._current()
        if token.type != TokenType.NUMERIC_LITERAL:
            raise self._unexpected(token, expected="a numeric literal")
        self._index += 1
        return NumericLiteral(token.start, value=token.value)


# =============================================================================
# Convenience Functions
# =============================================================================

def parse(
    tokens: list[Token],
    filename: str = "<input>",
    source_lines: Optional[list[str]] = None,
) -> list[Statement]:
    """
    Parse a token list with a fresh Parser.

    Args:
        tokens: Tokens from the lexer, terminated by EOF
        filename: Source filename for error messages
        source_lines: Original source lines for error context

    Returns:
        Top-level statements
    """
    return Parser(tokens, filename, source_lines).parse()
