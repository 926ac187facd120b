"""
otterc - Otter Front-End Command-Line Interface
===============================================

This module implements the command-line driver for the Otter front end.
It compiles one source file and leaves every intermediate result in an
output directory:

    OUT_DIR/tokenList.json   token list (JSON, indent 2)
    OUT_DIR/ast.json         top-level statements (JSON, indent 2)
    OUT_DIR/output.ll        generated IR text

The output directory is deleted and recreated on every run. otterc refuses
an output directory that is the working directory, one of its parents, or
a directory holding the input file.

Usage Examples
--------------
Basic compilation:
    $ otterc examples/hello_world.otter

Different output directory:
    $ otterc hello.otter -o build

Stop after parsing:
    $ otterc --no-ir hello.otter

Print the AST:
    $ otterc --ast hello.otter
"""

import json
import logging
import shutil
import sys
from pathlib import Path
from typing import Optional

import click

from otter import __version__
from otter.frontend import OtterCompiler, CompilerOptions, ASTPrinter, node_to_dict
from otter.cli.errors import ExitCode, handle_cli_exception

logger = logging.getLogger(__name__)

TOKEN_LIST_FILE = "tokenList.json"
AST_FILE = "ast.json"
IR_FILE = "output.ll"


def _write_json(path: Path, data) -> None:
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")
    logger.debug(f"Wrote {path}")


def _unsafe_out_dir(out_dir: Path, input_file: Path) -> Optional[str]:
    """
    Return why out_dir must not be recreated, or None if it is safe.

    The output directory is removed with everything in it, so it may not
    be the working directory, one of its ancestors, or a directory that
    holds the input file.
    """
    target = out_dir.resolve()
    cwd = Path.cwd().resolve()

    if target == cwd or target in cwd.parents:
        return "it is the working directory or one of its parents"
    if target in input_file.resolve().parents:
        return f"it contains the input file {input_file}"
    return None


def _reset_directory(path: Path) -> None:
    if path.exists():
        logger.debug(f"Removing {path}")
        shutil.rmtree(path)
    path.mkdir(parents=True)


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "input_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-o", "--out-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default="out",
    show_default=True,
    help="Directory for tokenList.json, ast.json and output.ll (recreated)",
)
@click.option(
    "--no-ir",
    is_flag=True,
    help="Stop after parsing; do not generate output.ll",
)
@click.option(
    "--ast",
    is_flag=True,
    help="Print the AST tree instead of generating IR",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output (debug logging)",
)
@click.version_option(version=__version__, prog_name="otterc")
def main(
    input_file: Path,
    out_dir: Path,
    no_ir: bool,
    ast: bool,
    verbose: bool,
) -> None:
    """
    Compile an Otter source file.

    INPUT_FILE is the Otter source file (.otter) to compile.

    \b
    Examples:
        otterc hello.otter              # Writes out/output.ll
        otterc hello.otter -o build     # Different output directory
        otterc --no-ir hello.otter      # Tokens and AST only
        otterc --ast hello.otter        # Print the AST tree
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    options = CompilerOptions(emit_ir=not (no_ir or ast))

    try:
        source = input_file.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        click.echo(f"Error: cannot read {input_file}: {e}", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    reason = _unsafe_out_dir(out_dir, input_file)
    if reason is not None:
        click.echo(f"Error: refusing to recreate output directory {out_dir}: {reason}", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    try:
        _reset_directory(out_dir)

        result = OtterCompiler(options).compile_source(source, str(input_file))

        _write_json(out_dir / TOKEN_LIST_FILE, [token.to_dict() for token in result.tokens])
        _write_json(out_dir / AST_FILE, [node_to_dict(stmt) for stmt in result.ast])

        if ast:
            click.echo(ASTPrinter().print(result.ast))
            return

        if options.emit_ir:
            (out_dir / IR_FILE).write_text(result.ir, encoding="utf-8")
            logger.debug(f"Wrote {out_dir / IR_FILE}")

        if verbose:
            click.echo(f"Tokenized: {result.token_count} tokens")
            click.echo(f"Parsed: {len(result.ast)} top-level statements")

        click.echo(f"Compiled {input_file} -> {out_dir}")

    except Exception as e:
        handle_cli_exception(e, verbose)


if __name__ == "__main__":
    main()
