"""
otterc Command-Line Tests
=========================

Tests for the otterc driver using click's CliRunner. Every test writes
into its own tmp_path output directory.
"""

import json

import pytest
from click.testing import CliRunner

from otter import __version__
from otter.cli.otterc import main
from otter.cli.errors import ExitCode
from otter.frontend.compiler import OtterCompiler


HELLO_WORLD = 'function main(): i32 {\n    printf("hi");\n}\n'


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def source_file(tmp_path):
    path = tmp_path / "hello.otter"
    path.write_text(HELLO_WORLD, encoding="utf-8")
    return path


def run(runner, *args):
    return runner.invoke(main, [str(a) for a in args])


# =============================================================================
# Basic Invocation Tests
# =============================================================================

class TestInvocation:
    """Help, version and argument validation."""

    def test_help(self, runner):
        result = run(runner, "--help")
        assert result.exit_code == 0
        assert "Compile an Otter source file" in result.output
        assert "--no-ir" in result.output

    def test_version(self, runner):
        result = run(runner, "--version")
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_missing_input(self, runner, tmp_path):
        result = run(runner, tmp_path / "missing.otter", "-o", tmp_path / "out")
        assert result.exit_code == ExitCode.INVALID_ARGS
        assert not (tmp_path / "out").exists()

    def test_no_arguments(self, runner):
        result = run(runner)
        assert result.exit_code == ExitCode.INVALID_ARGS


# =============================================================================
# Output Directory Tests
# =============================================================================

class TestOutputs:
    """Files written into the output directory."""

    def test_writes_all_outputs(self, runner, source_file, tmp_path):
        out_dir = tmp_path / "out"
        result = run(runner, source_file, "-o", out_dir)

        assert result.exit_code == ExitCode.SUCCESS, result.output
        assert sorted(p.name for p in out_dir.iterdir()) == [
            "ast.json",
            "output.ll",
            "tokenList.json",
        ]
        assert "Compiled" in result.output

    def test_token_list_json(self, runner, source_file, tmp_path):
        out_dir = tmp_path / "out"
        run(runner, source_file, "-o", out_dir)

        text = (out_dir / "tokenList.json").read_text(encoding="utf-8")
        tokens = json.loads(text)
        assert text.startswith("[\n  {")
        assert tokens[0] == {
            "type": "FUNCTION",
            "value": "function",
            "start": {"line": 1, "column": 0, "index": 0},
            "end": {"line": 1, "column": 8, "index": 8},
        }
        assert tokens[-1]["type"] == "EOF"

    def test_ast_json(self, runner, source_file, tmp_path):
        out_dir = tmp_path / "out"
        run(runner, source_file, "-o", out_dir)

        statements = json.loads((out_dir / "ast.json").read_text(encoding="utf-8"))
        assert len(statements) == 1
        assert statements[0]["type"] == "FUNCTION"
        assert statements[0]["data"]["name"] == "main"
        body = statements[0]["data"]["body"]["data"]["body"]
        assert body[0]["type"] == "EXPRESSION_STATEMENT"

    def test_ir_file(self, runner, source_file, tmp_path):
        out_dir = tmp_path / "out"
        run(runner, source_file, "-o", out_dir)

        ir = (out_dir / "output.ll").read_text(encoding="utf-8")
        assert ir == (
            "declare i32 @puts(ptr)\n"
            '@a = constant [3 x i8] c"hi\\00"\n'
            "\n"
            "define i32 @main() {\n"
            "  call i32 @puts(ptr @a)\n"
            "  ret i32 0\n"
            "}\n"
        )

    def test_output_directory_is_recreated(self, runner, source_file, tmp_path):
        out_dir = tmp_path / "out"
        out_dir.mkdir()
        (out_dir / "stale.txt").write_text("old")

        result = run(runner, source_file, "-o", out_dir)
        assert result.exit_code == ExitCode.SUCCESS
        assert not (out_dir / "stale.txt").exists()

    def test_default_output_directory(self, runner, source_file):
        with runner.isolated_filesystem():
            result = run(runner, source_file)
            assert result.exit_code == ExitCode.SUCCESS
            with open("out/output.ll", encoding="utf-8") as f:
                assert f.read().startswith("declare i32 @puts(ptr)")

    def test_no_ir(self, runner, tmp_path):
        source = tmp_path / "sum.otter"
        source.write_text("function main(): i32 { return 1 + 2; }")
        out_dir = tmp_path / "out"

        result = run(runner, source, "-o", out_dir, "--no-ir")
        assert result.exit_code == ExitCode.SUCCESS
        assert (out_dir / "ast.json").exists()
        assert not (out_dir / "output.ll").exists()

    def test_print_ast(self, runner, source_file, tmp_path):
        out_dir = tmp_path / "out"
        result = run(runner, source_file, "-o", out_dir, "--ast")

        assert result.exit_code == ExitCode.SUCCESS
        assert "Program" in result.output
        assert "Function: main(): i32" in result.output
        assert 'Expr: printf("hi")' in result.output
        assert not (out_dir / "output.ll").exists()

    def test_verbose(self, runner, source_file, tmp_path):
        result = run(runner, source_file, "-o", tmp_path / "out", "-v")
        assert result.exit_code == ExitCode.SUCCESS
        assert "Parsed: 1 top-level statements" in result.output


# =============================================================================
# Error Reporting Tests
# =============================================================================

class TestErrors:
    """Exit codes and messages for failing compilations."""

    def test_lex_error(self, runner, tmp_path):
        source = tmp_path / "bad.otter"
        source.write_text('function main(): i32 { printf("hi); }')

        result = run(runner, source, "-o", tmp_path / "out")
        assert result.exit_code == ExitCode.BUILD_ERROR
        assert "error: unterminated string literal" in result.output

    def test_unsupported_feature(self, runner, tmp_path):
        source = tmp_path / "sum.otter"
        source.write_text("function main(): i32 { return 1 + 2; }")

        result = run(runner, source, "-o", tmp_path / "out")
        assert result.exit_code == ExitCode.BUILD_ERROR
        assert "binary expressions not implemented" in result.output
        assert not (tmp_path / "out" / "output.ll").exists()

    def test_nested_function(self, runner, tmp_path):
        source = tmp_path / "nested.otter"
        source.write_text("function a(): i32 {\n  function b(): i32 { }\n}\n")

        result = run(runner, source, "-o", tmp_path / "out")
        assert result.exit_code == ExitCode.BUILD_ERROR
        assert f"{source}:2:2: error: cannot declare nested function" in result.output

    def test_output_directory_holding_source(self, runner, tmp_path):
        """The directory containing the input file is never removed."""
        project = tmp_path / "proj"
        project.mkdir()
        source = project / "hello.otter"
        source.write_text(HELLO_WORLD, encoding="utf-8")
        (project / "keep.txt").write_text("keep")

        result = run(runner, source, "-o", project)
        assert result.exit_code == ExitCode.INVALID_ARGS
        assert "refusing to recreate output directory" in result.output
        assert source.exists()
        assert (project / "keep.txt").exists()

    def test_output_directory_above_source(self, runner, tmp_path):
        nested = tmp_path / "src" / "pkg"
        nested.mkdir(parents=True)
        source = nested / "hello.otter"
        source.write_text(HELLO_WORLD, encoding="utf-8")

        result = run(runner, source, "-o", tmp_path / "src")
        assert result.exit_code == ExitCode.INVALID_ARGS
        assert source.exists()

    def test_working_directory_as_output(self, runner, source_file):
        with runner.isolated_filesystem():
            with open("keep.txt", "w") as f:
                f.write("keep")

            for out_dir in [".", ".."]:
                result = run(runner, source_file, "-o", out_dir)
                assert result.exit_code == ExitCode.INVALID_ARGS, out_dir

            with open("keep.txt") as f:
                assert f.read() == "keep"
        assert source_file.exists()

    def test_internal_error(self, runner, source_file, tmp_path, monkeypatch):
        def broken(self, source, filename="<input>"):
            raise RuntimeError("boom")

        monkeypatch.setattr(OtterCompiler, "compile_source", broken)
        result = run(runner, source_file, "-o", tmp_path / "out")
        assert result.exit_code == ExitCode.INTERNAL_ERROR
        assert "Internal error: boom" in result.output
