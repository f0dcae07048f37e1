"""
Go code generation from compiled formulas.

Produces a single Go source file with one variadic int64 function per formula
and a map from function name to function, for callers that dispatch formulas
by name from Go.
"""

from pathlib import Path
from typing import Iterable, Optional, Union

from formula_compile.generator import (
    EmitError,
    FormulaDescriptor,
    parameter_name,
    validate_descriptors,
    write_module,
)

DEFAULT_PACKAGE = "main"
DEFAULT_TABLE_NAME = "FormulaDict"

GO_KEYWORDS = frozenset(
    [
        "break",
        "case",
        "chan",
        "const",
        "continue",
        "default",
        "defer",
        "else",
        "fallthrough",
        "for",
        "func",
        "go",
        "goto",
        "if",
        "import",
        "interface",
        "map",
        "package",
        "range",
        "return",
        "select",
        "struct",
        "switch",
        "type",
        "var",
    ]
)


def is_valid_go_identifier(name: str) -> bool:
    """Check that a name can be used as a Go identifier."""
    return name.isidentifier() and name not in GO_KEYWORDS


def generate_go_function(desc: FormulaDescriptor) -> str:
    """
    Generate a Go function.

    Each variable is bound to its positional slot of the variadic params and
    the formula logic is returned as written.
    """
    params = parameter_name(desc.variables)
    lines = [
        f"// {desc.name} is a generated formula function.",
        f"func {desc.name}({params} ...int64) int64 {{",
    ]
    for index, var in enumerate(desc.variables):
        lines.append(f"\t{var} := {params}[{index}]")
    lines.append(f"\treturn {desc.logic}")
    lines.append("}")
    return "\n".join(lines)


class GoCodeGenerator:
    """
    Generator for a Go source file of formula functions.

    Usage:
        gen = GoCodeGenerator(package="formulas")
        gen.add_descriptor(descriptor)
        code = gen.generate()
    """

    def __init__(
        self,
        package: str = DEFAULT_PACKAGE,
        table_name: str = DEFAULT_TABLE_NAME,
    ):
        self.package = package
        self.table_name = table_name
        self.descriptors: list[FormulaDescriptor] = []

    def add_descriptor(self, descriptor: FormulaDescriptor) -> None:
        """Add a formula to the batch."""
        self.descriptors.append(descriptor)

    def _validate(self) -> None:
        if not is_valid_go_identifier(self.package):
            raise EmitError(f"Invalid Go package name {self.package!r}")
        if not is_valid_go_identifier(self.table_name):
            raise EmitError(f"Invalid Go table name {self.table_name!r}")

        validate_descriptors(self.descriptors)
        for desc in self.descriptors:
            names = [desc.name, *desc.variables]
            for name in names:
                if name in GO_KEYWORDS:
                    raise EmitError(
                        f"{name!r} in {desc.name} is a Go keyword"
                    )

    def generate(self) -> str:
        """Generate the complete Go source file."""
        self._validate()

        lines = [
            "// Code generated by formula-compile. DO NOT EDIT.",
            "",
            f"package {self.package}",
            "",
        ]

        for desc in self.descriptors:
            lines.append(generate_go_function(desc))
            lines.append("")

        lines.append(
            f"// {self.table_name} maps function names to formula functions."
        )
        lines.append(
            f"var {self.table_name} = map[string]func(...int64) int64{{"
        )
        for desc in self.descriptors:
            lines.append(f'\t"{desc.name}": {desc.name},')
        lines.append("}")
        lines.append("")

        return "\n".join(lines)


def emit_go(
    descriptors: Iterable[FormulaDescriptor],
    output_path: Optional[Union[str, Path]] = None,
    package: str = DEFAULT_PACKAGE,
    table_name: str = DEFAULT_TABLE_NAME,
) -> str:
    """
    Render descriptors as Go source and optionally write it.

    Returns:
        The generated Go source
    """
    gen = GoCodeGenerator(package=package, table_name=table_name)
    for desc in descriptors:
        gen.add_descriptor(desc)

    code = gen.generate()
    if output_path is not None:
        write_module(code, output_path)
    return code
