"""
IR Generator for Otter
======================

This module lowers the Otter AST to a textual, LLVM-flavoured IR. It is
the last stage of the front end. It covers the constructs needed for
"hello world" style programs and raises an UnsupportedFeatureError for
everything else.

Output Layout
-------------
The generated text has two parts separated by a blank line:

1. Global additions: external declarations and string constants that
   were synthesised while lowering the program
2. One ``define`` block per top-level function

Example output for ``function main(): i32 { printf("hi"); }``:

    declare i32 @puts(ptr)
    @a = constant [3 x i8] c"hi\\00"

    define i32 @main() {
      call i32 @puts(ptr @a)
      ret i32 0
    }

Lowering Rules
--------------
| Construct            | IR                                         |
|----------------------|--------------------------------------------|
| Function             | define <ret> @name(<args>) { ... }         |
| ExpressionStatement  | the expression as a bare instruction       |
| Return               | ret <operand>                              |
| StringLiteral        | global constant, operand ptr @name         |
| NumericLiteral       | operand i32 <value>                        |
| printf(...)          | call i32 @puts(<operands>)                 |

Every function body ends in a ``ret``: when the function has no return
statement of its own, ``ret i32 0`` is appended.

Global Names
------------
String constants are named by a bijective base-52 counter over
``a..z A..Z``, so the sequence runs a, b, ..., Z, aa, ab, ... and never
repeats.

Usage
-----
>>> from otter.frontend.codegen import Generator
>>> ir = Generator().generate(statements)
"""

import logging
import string
from typing import Optional

from otter.errors import Position
from otter.frontend.ast import (
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
from otter.frontend.types import TypeSignature
from otter.frontend.errors import CodeGenError, UnsupportedFeatureError

logger = logging.getLogger(__name__)


# Source type name -> IR type name
TYPE_MAP: dict[str, str] = {
    "string": "ptr",
}

# External functions every module may call
PUTS_DECLARATION = "declare i32 @puts(ptr)"

INDENT = "  "


# =============================================================================
# Unique Global Names
# =============================================================================

class NameGenerator:
    """
    Produces collision-free global symbol names.

    The Nth call returns the Nth string of the sequence
    a, b, ..., z, A, ..., Z, aa, ab, ... (spreadsheet-column style
    numbering over 52 symbols).
    """

    SYMBOLS = string.ascii_lowercase + string.ascii_uppercase

    def __init__(self):
        self._counter = 0

    def next_name(self) -> str:
        self._counter += 1
        n = self._counter
        base = len(self.SYMBOLS)

        name = ""
        while n > 0:
            n -= 1
            name = self.SYMBOLS[n % base] + name
            n //= base
        return name

    __call__ = next_name


# =============================================================================
# Type Mapping
# =============================================================================

def map_type(
    signature: TypeSignature,
    position: Optional[Position] = None,
    filename: Optional[str] = None,
) -> str:
    """
    Map an Otter type signature to an IR type name.

    Pointers and ``string`` become ``ptr``; primitive names pass through
    unchanged.

    Raises:
        UnsupportedFeatureError: For arrays, generics and non-primitive names
    """
    if signature.is_pointer:
        return "ptr"
    if signature.is_array or signature.has_generic:
        raise UnsupportedFeatureError(
            f"type mapping for '{signature}'", position=position, filename=filename
        )
    if signature.type_name in TYPE_MAP:
        return TYPE_MAP[signature.type_name]
    if signature.is_primitive:
        return signature.type_name
    raise UnsupportedFeatureError(
        f"type mapping for '{signature}'", position=position, filename=filename
    )


def encode_string_constant(value: str) -> tuple[str, int]:
    """
    Encode a string as the body of an IR ``c"..."`` constant.

    Printable ASCII other than '"' and '\\' is kept as is; every other
    byte of the UTF-8 encoding is written as a \\XX hex escape.

    Returns:
        Tuple of (escaped text without terminator, byte length)
    """
    data = value.encode("utf-8")
    parts = []
    for byte in data:
        if 0x20 <= byte < 0x7F and byte not in (ord('"'), ord("\\")):
            parts.append(chr(byte))
        else:
            parts.append(f"\\{byte:02X}")
    return "".join(parts), len(data)


# =============================================================================
# Generator
# =============================================================================

class Generator:
    """
    Generates IR text from the Otter AST.

    State is private to one generate() call: the list of global additions
    (seeded with the puts declaration) and the name generator are
    recreated every time generate() starts.

    Attributes:
        global_additions: Declarations and constants emitted so far
    """

    def __init__(self, filename: str = "<input>"):
        self.filename = filename
        self.global_additions: list[str] = []
        self._names = NameGenerator()

    def generate(self, statements: list[Statement]) -> str:
        """
        Generate IR text for a list of top-level statements.

        Args:
            statements: The AST produced by the parser

        Returns:
            Complete IR text

        Raises:
            UnsupportedFeatureError: For constructs that cannot be lowered yet
            CodeGenError: For statements that cannot appear where they are
        """
        self.global_additions = [PUTS_DECLARATION]
        self._names = NameGenerator()

        bodies = [self._generate_statement(stmt) for stmt in statements]

        logger.debug(
            f"Generated {len(bodies)} top-level definitions, "
            f"{len(self.global_additions)} global additions"
        )
        header = "\n".join(self.global_additions)
        return header + "\n\n" + "".join(body + "\n" for body in bodies)

    # =========================================================================
    # Statements
    # =========================================================================

    def _generate_statement(self, stmt: Statement) -> str:
        if isinstance(stmt, Function):
            return self._generate_function(stmt)
        if isinstance(stmt, ExpressionStatement):
            return self._generate_expression(stmt.expression)
        if isinstance(stmt, Return):
            return f"ret {self._generate_expression(stmt.value)}"

        raise CodeGenError(
            f"unexpected statement {stmt.kind}",
            position=stmt.position,
            filename=self.filename,
        )

    def _generate_function(self, func: Function) -> str:
        """
        Generate a ``define`` block.

        Only direct children of the body count as an explicit return.
        """
        return_type = map_type(func.return_type, func.position, self.filename)
        # IR argument lists are comma separated
        arguments = ", ".join(
            f"{map_type(arg.type, func.position, self.filename)} %{arg.name}"
            for arg in func.arguments
        )

        body = self._function_body(func)

        lines = [f"define {return_type} @{func.name}({arguments}) {{"]
        for stmt in body.body:
            lines.append(INDENT + self._generate_statement(stmt))

        if not any(isinstance(stmt, Return) for stmt in body.body):
            lines.append(INDENT + "ret i32 0")

        lines.append("}")
        return "\n".join(lines)

    def _function_body(self, func: Function) -> Block:
        if not isinstance(func.body, Block):
            raise CodeGenError(
                f"function '{func.name}' has no body",
                position=func.position,
                filename=self.filename,
            )
        return func.body

    # =========================================================================
    # Expressions
    # =========================================================================

    def _generate_expression(self, expr: Expression) -> str:
        if isinstance(expr, StringLiteral):
            return self._generate_string(expr)
        if isinstance(expr, NumericLiteral):
            return f"i32 {self._numeric_text(expr.value)}"
        if isinstance(expr, FunctionCall):
            return self._generate_call(expr)
        if isinstance(expr, BinaryExpression):
            raise UnsupportedFeatureError(
                "binary expressions",
                position=expr.position,
                filename=self.filename,
                hint="only literal operands can be lowered for now",
            )

        raise CodeGenError(
            f"unexpected expression {type(expr).__name__}",
            position=getattr(expr, "position", None),
            filename=self.filename,
        )

    def _generate_string(self, expr: StringLiteral) -> str:
        """Allocate a global constant for a string literal."""
        name = self._names.next_name()
        encoded, length = encode_string_constant(expr.value)
        self.global_additions.append(
            f'@{name} = constant [{length + 1} x i8] c"{encoded}\\00"'
        )
        return f"ptr @{name}"

    def _generate_call(self, expr: FunctionCall) -> str:
        """
        Generate a call.

        printf is the only callable function and is lowered to puts.
        """
        if expr.function_name != "printf":
            raise UnsupportedFeatureError(
                f"calling function '{expr.function_name}'",
                position=expr.position,
                filename=self.filename,
                hint="only 'printf' is supported",
            )

        operands = ", ".join(self._generate_expression(arg) for arg in expr.arguments)
        return f"call i32 @puts({operands})"

    @staticmethod
    def _numeric_text(value: str) -> str:
        """Render 0x/0b prefixed literals in decimal; other text is kept."""
        if value[:2] in ("0x", "0b"):
            return str(int(value, 0))
        return value


# =============================================================================
# Convenience Functions
# =============================================================================

def generate(statements: list[Statement], filename: str = "<input>") -> str:
    """
    Generate IR text with a fresh Generator.

    Args:
        statements: Top-level statements from the parser
        filename: Source filename for error messages

    Returns:
        IR text
    """
    return Generator(filename).generate(statements)
