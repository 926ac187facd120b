"""
Otter IR Generator Test Suite
=============================

Tests for IR generation: global name allocation, type mapping, string
constants and function lowering.
"""

import pytest
from otter.errors import Position
from otter.frontend.lexer import lex
from otter.frontend.parser import parse
from otter.frontend.types import make_type
from otter.frontend.ast import Block, Return, NumericLiteral
from otter.frontend.codegen import (
    Generator,
    NameGenerator,
    PUTS_DECLARATION,
    encode_string_constant,
    generate,
    map_type,
)
from otter.frontend.errors import CodeGenError, UnsupportedFeatureError


P = Position(1, 0, 0)


def generate_source(source: str) -> str:
    return generate(parse(lex(source)), "<test>")


def function_lines(ir: str) -> list:
    """Lines after the blank line that separates globals from definitions."""
    return ir.split("\n\n", 1)[1].splitlines()


# =============================================================================
# Name Generator Tests
# =============================================================================

class TestNameGenerator:
    """Bijective base-52 global names."""

    def test_first_names(self):
        names = NameGenerator()
        generated = [names.next_name() for _ in range(54)]
        assert generated[:26] == list("abcdefghijklmnopqrstuvwxyz")
        assert generated[26:52] == list("ABCDEFGHIJKLMNOPQRSTUVWXYZ")
        assert generated[52:] == ["aa", "ab"]

    def test_rollover(self):
        names = NameGenerator()
        generated = [names() for _ in range(105)]
        assert generated[103] == "aZ"
        assert generated[104] == "ba"

    def test_names_are_unique(self):
        names = NameGenerator()
        generated = [names() for _ in range(5000)]
        assert len(set(generated)) == len(generated)

    def test_independent_generators(self):
        first, second = NameGenerator(), NameGenerator()
        first()
        assert second() == "a"


# =============================================================================
# Type Mapping Tests
# =============================================================================

class TestTypeMapping:
    """Otter type signatures to IR type names."""

    def test_primitive_passes_through(self):
        assert map_type(make_type("i32")) == "i32"
        assert map_type(make_type("u8")) == "u8"

    def test_string_is_pointer(self):
        assert map_type(make_type("string")) == "ptr"

    def test_pointer(self):
        assert map_type(make_type("Node", is_pointer=True)) == "ptr"

    def test_array_not_implemented(self):
        with pytest.raises(UnsupportedFeatureError) as exc_info:
            map_type(make_type("i32", is_array=True))
        assert "type mapping for 'i32[]' not implemented" in str(exc_info.value)

    def test_generic_not_implemented(self):
        with pytest.raises(UnsupportedFeatureError):
            map_type(make_type("List", generic_type=make_type("i32")))

    def test_unknown_name_not_implemented(self):
        with pytest.raises(UnsupportedFeatureError):
            map_type(make_type("Node"))


# =============================================================================
# String Constant Tests
# =============================================================================

class TestStringConstants:
    """Encoding of c"..." constant bodies."""

    def test_plain_text(self):
        assert encode_string_constant("hi") == ("hi", 2)

    def test_control_characters(self):
        assert encode_string_constant("a\nb\r") == ("a\\0Ab\\0D", 4)

    def test_quote_and_backslash(self):
        assert encode_string_constant('say "x"\\') == ("say \\22x\\22\\5C", 8)

    def test_utf8_length_in_bytes(self):
        assert encode_string_constant("é") == ("\\C3\\A9", 2)

    def test_constant_line(self):
        ir = generate_source('function main(): i32 { printf("a\\n"); }')
        assert '@a = constant [3 x i8] c"a\\0A\\00"' in ir.splitlines()

    def test_empty_string(self):
        ir = generate_source('function main(): i32 { printf(""); }')
        assert '@a = constant [1 x i8] c"\\00"' in ir.splitlines()


# =============================================================================
# Function Lowering Tests
# =============================================================================

class TestFunctions:
    """define blocks and statements inside them."""

    def test_hello_world(self):
        ir = generate_source('function main(): i32 { printf("hi"); }')
        assert ir == (
            "declare i32 @puts(ptr)\n"
            '@a = constant [3 x i8] c"hi\\00"\n'
            "\n"
            "define i32 @main() {\n"
            "  call i32 @puts(ptr @a)\n"
            "  ret i32 0\n"
            "}\n"
        )

    def test_empty_program(self):
        assert generate([]) == PUTS_DECLARATION + "\n\n"

    def test_explicit_return(self):
        """No implicit return is added after a direct return statement."""
        ir = generate_source("function main(): i32 { return 7; }")
        assert function_lines(ir) == [
            "define i32 @main() {",
            "  ret i32 7",
            "}",
        ]

    def test_empty_body_gets_return(self):
        ir = generate_source("function main(): i32 { }")
        assert function_lines(ir) == ["define i32 @main() {", "  ret i32 0", "}"]

    def test_return_string(self):
        ir = generate_source('function name(): string { return "otter"; }')
        assert "define ptr @name() {" in ir
        assert "  ret ptr @a" in ir

    def test_hex_and_binary_literals(self):
        ir = generate_source("function main(): i32 { printf(0x1F, 0b101, 1.5); }")
        assert "  call i32 @puts(i32 31, i32 5, i32 1.5)" in ir

    def test_arguments(self):
        ir = generate_source(
            "function f(s: string, n: i32, p: *Node): i32 { }"
        )
        assert "define i32 @f(ptr %s, i32 %n, ptr %p) {" in ir

    def test_multiple_strings_get_distinct_names(self):
        ir = generate_source(
            'function main(): i32 { printf("one"); printf("two", "three"); }'
        )
        lines = ir.splitlines()
        assert lines[0] == "declare i32 @puts(ptr)"
        assert lines[1] == '@a = constant [4 x i8] c"one\\00"'
        assert lines[2] == '@b = constant [4 x i8] c"two\\00"'
        assert lines[3] == '@c = constant [6 x i8] c"three\\00"'
        assert "  call i32 @puts(ptr @b, ptr @c)" in lines

    def test_multiple_functions(self):
        ir = generate_source(
            'function a(): i32 { printf("x"); }\n'
            'function b(): i32 { printf("y"); }\n'
        )
        assert ir.endswith(
            "define i32 @a() {\n  call i32 @puts(ptr @a)\n  ret i32 0\n}\n"
            "define i32 @b() {\n  call i32 @puts(ptr @b)\n  ret i32 0\n}\n"
        )

    def test_generator_is_reusable(self):
        """Each generate() call starts with fresh globals and names."""
        statements = parse(lex('function main(): i32 { printf("hi"); }'))
        generator = Generator()
        assert generator.generate(statements) == generator.generate(statements)
        assert generator.global_additions == [
            PUTS_DECLARATION,
            '@a = constant [3 x i8] c"hi\\00"',
        ]


# =============================================================================
# Unsupported Construct Tests
# =============================================================================

class TestUnsupported:
    """Recognised constructs without a lowering."""

    def test_binary_expression(self):
        with pytest.raises(UnsupportedFeatureError) as exc_info:
            generate_source("function main(): i32 { return 1 + 2; }")
        assert "binary expressions not implemented" in str(exc_info.value)

    def test_call_other_function(self):
        with pytest.raises(UnsupportedFeatureError) as exc_info:
            generate_source("function main(): i32 { foo(); }")
        assert "calling function 'foo' not implemented" in str(exc_info.value)

    def test_unmapped_return_type(self):
        with pytest.raises(UnsupportedFeatureError):
            generate_source("function main(): List<i32> { }")

    def test_error_carries_filename(self):
        with pytest.raises(UnsupportedFeatureError) as exc_info:
            generate(parse(lex("function main(): i32 {\n  return 1 * 2;\n}")), "m.otter")
        assert str(exc_info.value).startswith("m.otter:2:9: error:")

    def test_unexpected_statement(self):
        with pytest.raises(CodeGenError) as exc_info:
            generate([Block(P, body=())])
        assert "unexpected statement BLOCK" in str(exc_info.value)

    def test_top_level_return(self):
        """A bare return outside a function still lowers to ret."""
        ir = generate([Return(P, value=NumericLiteral(P, value="3"))])
        assert ir.endswith("\n\nret i32 3\n")
