"""
Command-line interface for formula-compile.

Usage:
    formula-compile "a + b - c" "a * b + c/d" -o formulas.py
    formula-compile -f formulas.txt --target go -o formula_generated.go
"""

from typing import Optional

import click

from formula_compile import __version__
from formula_compile.ast_parser import ParseError
from formula_compile.compiler import compile_formulas
from formula_compile.generator import EmitError, emit
from formula_compile.go_generator import emit_go
from formula_compile.registry import FormulaRegistry
from formula_compile.sources import SAMPLE_FORMULAS, read_formula_file


def report(message: str) -> None:
    click.echo(message, err=True)


@click.command()
@click.argument("formulas", nargs=-1)
@click.option(
    "--file",
    "-f",
    "formula_file",
    type=click.Path(exists=True, dir_okay=False),
    help="Read formulas from a file (one per line, or a JSON array)",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False),
    help="Output file path (stdout if not specified)",
)
@click.option(
    "--target",
    "-t",
    type=click.Choice(["python", "go"]),
    default="python",
    show_default=True,
    help="Language of the generated code",
)
@click.option(
    "--skip-errors",
    is_flag=True,
    help="Skip malformed formulas instead of aborting the batch",
)
@click.option(
    "--dry-run",
    is_flag=True,
    help="Show what would be compiled without generating code",
)
@click.option(
    "--table-name",
    default=None,
    help="Name of the generated lookup table",
)
@click.option(
    "--package",
    default="main",
    show_default=True,
    help="Go package name (go target only)",
)
@click.version_option(version=__version__)
def main(
    formulas: tuple[str, ...],
    formula_file: Optional[str],
    output: Optional[str],
    target: str,
    skip_errors: bool,
    dry_run: bool,
    table_name: Optional[str],
    package: str,
) -> None:
    """
    Compile arithmetic formulas into named functions plus a lookup table.

    Without FORMULAS or --file, a small sample batch is compiled.

    Examples:

        formula-compile "a + b - c" "a * b + c/d"

        formula-compile -f formulas.txt -o formulas.py

        formula-compile -f formulas.json --target go -o formula_generated.go
    """
    sources = list(formulas)
    if formula_file:
        try:
            sources.extend(read_formula_file(formula_file))
        except ValueError as e:
            raise click.ClickException(str(e))
    if not formulas and not formula_file:
        sources = list(SAMPLE_FORMULAS)

    click.echo(f"Compiling {len(sources)} formula(s)...", err=True)

    try:
        batch = compile_formulas(
            sources,
            registry=FormulaRegistry(),
            skip_errors=skip_errors,
            report=report,
        )
    except ParseError as e:
        raise click.ClickException(str(e))

    click.echo(
        f"Compiled {len(batch.descriptors)} function(s), "
        f"skipped {len(batch.duplicates)} duplicate(s), "
        f"{len(batch.errors)} error(s)",
        err=True,
    )

    if dry_run:
        click.echo("\nFunctions to generate:")
        for desc in batch.descriptors:
            variables = ", ".join(desc.variables) or "(none)"
            click.echo(f"  {desc.name}: {desc.logic} <- [{variables}]")
        return

    try:
        if target == "go":
            code = emit_go(
                batch.descriptors,
                output,
                package=package,
                table_name=table_name or "FormulaDict",
            )
        else:
            code = emit(
                batch.descriptors,
                output,
                table_name=table_name or "FORMULA_TABLE",
            )
    except EmitError as e:
        raise click.ClickException(str(e))

    if output:
        click.echo(f"Written to {output}", err=True)
        click.echo(f"Code size: {len(code):,} bytes", err=True)
    else:
        click.echo(code)


if __name__ == "__main__":
    main()
