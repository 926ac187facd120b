"""
Otter Abstract Syntax Tree (AST) Definitions
============================================

This module defines the AST node types produced by the Otter parser
and consumed by the IR generator.

Node Hierarchy
--------------
ASTNode (base)
├── Statements
│   ├── Block - braced list of local statements
│   ├── Function - top-level function declaration
│   ├── ExpressionStatement - expression followed by ';'
│   ├── Return - return statement
│   ├── VariableDeclaration - reserved, never produced by the parser
│   └── Import - reserved, never produced by the parser
├── Expressions
│   ├── StringLiteral - "text"
│   ├── NumericLiteral - literal text such as 42 or 0x1F
│   ├── BinaryExpression - left <operator> right
│   └── FunctionCall - name(arguments...)
└── Argument - function argument declaration (name: Type)

Design Notes
------------
- All nodes are frozen dataclasses; sequence fields are tuples, so a
  tree cannot change once the parser has built it
- Each node stores the position of the first token consumed to build it
- Positions are excluded from equality, so two trees with the same shape
  compare equal wherever they came from
- ``Statement`` and ``Expression`` are closed unions; consumers dispatch
  on the concrete class and reject anything else
"""

import dataclasses
from dataclasses import dataclass, field
from typing import Any, ClassVar, Optional, Union

from otter.errors import Position
from otter.frontend.types import TypeSignature


# =============================================================================
# AST Node Base Class
# =============================================================================

@dataclass(frozen=True)
class ASTNode:
    """
    Base class for all AST nodes.

    Attributes:
        position: Start position of the first token of this node
        kind: Tag used when the node is serialised
    """
    position: Position = field(compare=False)

    kind: ClassVar[str] = "NODE"


# =============================================================================
# Expression Nodes
# =============================================================================

@dataclass(frozen=True)
class StringLiteral(ASTNode):
    """
    String literal with escapes already decoded.

    Attributes:
        value: The string content without quotes
    """
    value: str = ""

    kind: ClassVar[str] = "STRING_LITERAL"


@dataclass(frozen=True)
class NumericLiteral(ASTNode):
    """
    Numeric literal.

    Attributes:
        value: The literal text exactly as written (e.g. "42", "0x1F")
    """
    value: str = ""

    kind: ClassVar[str] = "NUMERIC_LITERAL"


@dataclass(frozen=True)
class BinaryExpression(ASTNode):
    """
    Binary operator expression.

    Attributes:
        left: Left operand
        right: Right operand
        operator: Operator symbol ("+", "*", "==", ...)
    """
    left: "Expression" = None
    right: "Expression" = None
    operator: str = ""

    kind: ClassVar[str] = "BINARY_EXPRESSION"


@dataclass(frozen=True)
class FunctionCall(ASTNode):
    """
    Call of a named function.

    Attributes:
        function_name: Name of the called function
        arguments: Argument expressions in call order
    """
    function_name: str = ""
    arguments: tuple["Expression", ...] = ()

    kind: ClassVar[str] = "FUNCTION_CALL"


Expression = Union[StringLiteral, NumericLiteral, BinaryExpression, FunctionCall]


# =============================================================================
# Declaration Helpers
# =============================================================================

@dataclass(frozen=True)
class Argument:
    """
    Function argument declaration.

    Attributes:
        name: Argument name
        type: Declared type
    """
    name: str
    type: TypeSignature


# =============================================================================
# Statement Nodes
# =============================================================================

@dataclass(frozen=True)
class Block(ASTNode):
    """
    Braced statement list.

    Attributes:
        body: Statements in source order
    """
    body: tuple["Statement", ...] = ()

    kind: ClassVar[str] = "BLOCK"


@dataclass(frozen=True)
class Function(ASTNode):
    """
    Function declaration. Only valid at top level.

    Attributes:
        name: Function name
        arguments: Declared arguments
        body: The function body
        return_type: Declared return type
    """
    name: str = ""
    arguments: tuple[Argument, ...] = ()
    body: Block = None
    return_type: TypeSignature = None

    kind: ClassVar[str] = "FUNCTION"


@dataclass(frozen=True)
class ExpressionStatement(ASTNode):
    """
    Expression used as a statement (followed by semicolon).

    Attributes:
        expression: The expression
    """
    expression: Expression = None

    kind: ClassVar[str] = "EXPRESSION_STATEMENT"


@dataclass(frozen=True)
class Return(ASTNode):
    """
    Return statement.

    Attributes:
        value: The returned expression
    """
    value: Expression = None

    kind: ClassVar[str] = "RETURN"


@dataclass(frozen=True)
class VariableDeclaration(ASTNode):
    """Variable declaration. Reserved; the parser does not produce it yet."""
    name: str = ""
    var_type: Optional[TypeSignature] = None
    value: Optional[Expression] = None

    kind: ClassVar[str] = "VAR_DECL"


@dataclass(frozen=True)
class Import(ASTNode):
    """Module import. Reserved; the parser does not produce it yet."""
    namespace: str = ""

    kind: ClassVar[str] = "IMPORT"


Statement = Union[Block, Function, ExpressionStatement, Return, VariableDeclaration, Import]


# =============================================================================
# Serialisation
# =============================================================================

def node_to_dict(node: Any) -> Any:
    """
    Convert an AST node (or a value inside one) to JSON-ready data.

    Nodes become ``{"type": kind, "data": {...}, "position": {...}}``.

    Example:
        >>> node_to_dict(StringLiteral(Position(1, 0, 0), value="hi"))
        {'type': 'STRING_LITERAL', 'data': {'value': 'hi'}, 'position': {'line': 1, 'column': 0, 'index': 0}}
    """
    if isinstance(node, ASTNode):
        data = {
            f.name: node_to_dict(getattr(node, f.name))
            for f in dataclasses.fields(node)
            if f.name != "position"
        }
        return {
            "type": node.kind,
            "data": data,
            "position": node.position.to_dict() if node.position else None,
        }
    if isinstance(node, Argument):
        return {"name": node.name, "type": node.type.to_dict()}
    if isinstance(node, TypeSignature):
        return node.to_dict()
    if isinstance(node, (list, tuple)):
        return [node_to_dict(item) for item in node]
    return node


# =============================================================================
# AST Visitor Pattern
# =============================================================================

class ASTVisitor:
    """
    Base class for AST visitors.

    Subclasses implement visit_<ClassName> methods for the node types
    they handle. Unhandled node types go to generic_visit.

    Example:
        class CallCounter(ASTVisitor):
            def visit_FunctionCall(self, node):
                self.count += 1
    """

    def visit(self, node: ASTNode) -> Any:
        """Dispatch to the visit_<ClassName> method for this node."""
        method = getattr(self, f"visit_{type(node).__name__}", self.generic_visit)
        return method(node)

    def generic_visit(self, node: ASTNode) -> None:
        """Visit every child node of a node."""
        for f in dataclasses.fields(node):
            value = getattr(node, f.name)
            if isinstance(value, ASTNode):
                self.visit(value)
            elif isinstance(value, tuple):
                for item in value:
                    if isinstance(item, ASTNode):
                        self.visit(item)


# =============================================================================
# AST Pretty Printer
# =============================================================================

class ASTPrinter(ASTVisitor):
    """
    Pretty printer for AST debugging.

    Usage:
        printer = ASTPrinter()
        print(printer.print(statements))
    """

    def __init__(self):
        self.output: list[str] = []
        self.indent_level = 0

    def print(self, nodes) -> str:
        """Print a node or a list of top-level statements and return the text."""
        self.output = []
        self.indent_level = 0
        if isinstance(nodes, ASTNode):
            nodes = [nodes]
        self._emit("Program")
        self.indent_level += 1
        for node in nodes:
            self.visit(node)
        return "\n".join(self.output)

    def _emit(self, text: str) -> None:
        self.output.append("  " * self.indent_level + text)

    def visit_Function(self, node: Function):
        args = ", ".join(f"{a.name}: {a.type}" for a in node.arguments)
        self._emit(f"Function: {node.name}({args}): {node.return_type}")
        self.indent_level += 1
        self.visit(node.body)
        self.indent_level -= 1

    def visit_Block(self, node: Block):
        self._emit("Block")
        self.indent_level += 1
        for stmt in node.body:
            self.visit(stmt)
        self.indent_level -= 1

    def visit_ExpressionStatement(self, node: ExpressionStatement):
        self._emit(f"Expr: {self._expr_str(node.expression)}")

    def visit_Return(self, node: Return):
        self._emit(f"Return {self._expr_str(node.value)}")

    def generic_visit(self, node: ASTNode) -> None:
        self._emit(f"<{type(node).__name__}>")

    def _expr_str(self, expr: Expression) -> str:
        """Convert expression to string representation."""
        if isinstance(expr, NumericLiteral):
            return expr.value
        if isinstance(expr, StringLiteral):
            return f'"{expr.value}"'
        if isinstance(expr, BinaryExpression):
            return f"({self._expr_str(expr.left)} {expr.operator} {self._expr_str(expr.right)})"
        if isinstance(expr, FunctionCall):
            args = ", ".join(self._expr_str(a) for a in expr.arguments)
            return f"{expr.function_name}({args})"
        return f"<{type(expr).__name__}>"
