"""
Otter Compiler Main Module
==========================

This module provides the main compiler interface for Otter. It
orchestrates the complete front-end pipeline:

    Source → Lex → Parse → Generate → IR text

Usage
-----
Command line:
    $ otterc hello_world.otter -o out

Programmatic:
    >>> from otter.frontend import compile_otter
    >>> ir = compile_otter('function main(): i32 { printf("hi"); }')

Compilation Pipeline
--------------------
1. **Lexical Analysis**: Convert source to tokens
2. **Parsing**: Build the list of top-level statements (AST)
3. **IR Generation**: Lower the AST to IR text

Each stage finishes completely before the next one starts.

Error Handling
--------------
Every error is fatal. The first OtterCompileError raised by a stage
propagates unchanged to the caller; no partial result is returned.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from otter.frontend.lexer import Lexer, Token
from otter.frontend.parser import Parser
from otter.frontend.codegen import Generator
from otter.frontend.ast import Statement

logger = logging.getLogger(__name__)


@dataclass
class CompilerOptions:
    """
    Compiler configuration options.

    Attributes:
        emit_ir: Run IR generation after parsing. When False the pipeline
                 stops after the AST is built, which is useful for
                 inspecting programs the generator cannot lower yet.
    """
    emit_ir: bool = True


@dataclass
class CompilerResult:
    """
    Result of a compilation.

    Attributes:
        filename: Source filename
        tokens: Token list from the lexer
        ast: Top-level statements from the parser
        ir: Generated IR text (empty when emit_ir is False)
    """
    filename: str = ""
    tokens: list[Token] = field(default_factory=list)
    ast: list[Statement] = field(default_factory=list)
    ir: str = ""

    @property
    def token_count(self) -> int:
        return len(self.tokens)


class OtterCompiler:
    """
    Otter front-end compiler.

    Example:
        compiler = OtterCompiler()
        result = compiler.compile_file("hello_world.otter")
        print(result.ir)

    Attributes:
        options: Compiler configuration options
    """

    def __init__(self, options: Optional[CompilerOptions] = None):
        self.options = options or CompilerOptions()

    def compile_source(self, source: str, filename: str = "<input>") -> CompilerResult:
        """
        Compile Otter source code.

        Args:
            source: Otter source code string
            filename: Source filename for error messages

        Returns:
            CompilerResult with tokens, AST and IR

        Raises:
            OtterCompileError: If any stage fails
        """
        result = CompilerResult(filename=filename)

        logger.info(f"Starting lexer for {filename}")
        result.tokens = Lexer(source, filename).lex()

        logger.info(f"Starting parser for {filename}")
        result.ast = Parser(result.tokens, filename, source.splitlines()).parse()

        if self.options.emit_ir:
            logger.info(f"Starting IR generation for {filename}")
            result.ir = Generator(filename).generate(result.ast)
        else:
            logger.info("Skipping IR generation")

        return result

    def compile_file(self, filepath: str) -> CompilerResult:
        """
        Compile an Otter source file.

        Raises:
            FileNotFoundError: If the source file does not exist
            OtterCompileError: If compilation fails
        """
        path = Path(filepath)
        if not path.exists():
            raise FileNotFoundError(f"Source file not found: {filepath}")

        source = path.read_text(encoding="utf-8")
        return self.compile_source(source, str(filepath))


# =============================================================================
# Convenience Functions
# =============================================================================

def compile_otter(source: str, filename: str = "<input>") -> str:
    """
    Compile Otter source code to IR text.

    Example:
        >>> print(compile_otter('function main(): i32 { printf("hi"); }'))
        declare i32 @puts(ptr)
        @a = constant [3 x i8] c"hi\\00"
        <BLANKLINE>
        define i32 @main() {
          call i32 @puts(ptr @a)
          ret i32 0
        }
        <BLANKLINE>
    """
    return OtterCompiler().compile_source(source, filename).ir
