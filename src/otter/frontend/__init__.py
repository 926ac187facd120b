"""
Otter Front End
===============

This package implements the front end of the Otter toolchain: it turns
Otter source text into a textual, LLVM-flavoured intermediate
representation.

- A lexer (tokenizer) producing positioned tokens
- A recursive descent / precedence climbing parser producing an AST
- An IR generator producing declarations, constants and functions

Pipeline
--------
    Otter Source → Lexer → Parser → AST → Generator → IR text

Usage
-----
>>> from otter.frontend import lex, parse, generate
>>> ir = generate(parse(lex('function main(): i32 { printf("hi"); }')))

Language Subset
---------------
Supported:
- Top-level function declarations with typed arguments and return type
- Type signatures with pointer, generic and array modifiers
- Calls to printf with string or numeric arguments
- return with a string, numeric literal or arithmetic expression

Recognised but not implemented:
- Variable assignment
- Calls to functions other than printf
- Lowering binary expressions to IR

Tokenized only: control flow, structs, enums, imports and modules.
"""

from otter.frontend.compiler import OtterCompiler, CompilerOptions, CompilerResult, compile_otter
from otter.frontend.errors import (
    OtterCompileError,
    OtterSyntaxError,
    LexError,
    ParseError,
    UnsupportedFeatureError,
    CodeGenError,
)
from otter.frontend.lexer import Lexer, Token, TokenType, lex
from otter.frontend.parser import Parser, parse
from otter.frontend.codegen import Generator, NameGenerator, generate
from otter.frontend.types import TypeSignature, PRIMITIVE_TYPES
from otter.frontend.ast import (
    Argument,
    BinaryExpression,
    Block,
    ExpressionStatement,
    Function,
    FunctionCall,
    Import,
    NumericLiteral,
    Return,
    StringLiteral,
    VariableDeclaration,
    ASTPrinter,
    node_to_dict,
)

__all__ = [
    # Main API
    "OtterCompiler",
    "CompilerOptions",
    "CompilerResult",
    "compile_otter",
    # Errors
    "OtterCompileError",
    "OtterSyntaxError",
    "LexError",
    "ParseError",
    "UnsupportedFeatureError",
    "CodeGenError",
    # Lexer
    "Lexer",
    "Token",
    "TokenType",
    "lex",
    # Parser
    "Parser",
    "parse",
    # Generator
    "Generator",
    "NameGenerator",
    "generate",
    # Types
    "TypeSignature",
    "PRIMITIVE_TYPES",
    # AST Nodes
    "Argument",
    "BinaryExpression",
    "Block",
    "ExpressionStatement",
    "Function",
    "FunctionCall",
    "Import",
    "NumericLiteral",
    "Return",
    "StringLiteral",
    "VariableDeclaration",
    "ASTPrinter",
    "node_to_dict",
]
