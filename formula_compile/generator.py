"""
Standalone Python code generation from compiled formulas.

This module turns a batch of formula descriptors into a Python module with one
function per formula and a lookup table from function name to function.
"""

import keyword
import os
import re
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, Optional, Union

DEFAULT_TABLE_NAME = "FORMULA_TABLE"


class EmitError(RuntimeError):
    """Rendering or writing a batch of formulas failed."""

    def __init__(self, message: str, cause: Any = None):
        self.cause = cause
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)


@dataclass(frozen=True)
class FormulaDescriptor:
    """A named formula ready for emission."""

    name: str
    logic: str
    variables: tuple[str, ...]


def build_descriptor(
    text: str, variables: Iterable[str], name: str
) -> FormulaDescriptor:
    """Pair a minted name with its formula text and binding order."""
    return FormulaDescriptor(name=name, logic=text, variables=tuple(variables))


def is_valid_identifier(name: str) -> bool:
    """Check that a name can be used as a Python identifier."""
    return name.isidentifier() and not keyword.iskeyword(name)


def validate_descriptors(descriptors: list[FormulaDescriptor]) -> None:
    """
    Check that every descriptor can be rendered.

    Raises:
        EmitError: On invalid or repeated names, invalid variables, or
            empty or multi-line logic
    """
    seen = set()
    for desc in descriptors:
        if not is_valid_identifier(desc.name):
            raise EmitError(f"Invalid function name {desc.name!r}")
        if desc.name in seen:
            raise EmitError(f"Duplicate function name {desc.name!r}")
        seen.add(desc.name)

        if not desc.logic.strip():
            raise EmitError(f"Empty logic for {desc.name}")
        # Logic is rendered on the return line as written
        if "\n" in desc.logic or "\r" in desc.logic:
            raise EmitError(f"Multi-line logic for {desc.name}")

        for var in desc.variables:
            if not is_valid_identifier(var):
                raise EmitError(f"Invalid variable {var!r} in {desc.name}")


def parameter_name(variables: Iterable[str]) -> str:
    """
    Pick the name of the variadic parameter.

    Defaults to `params`, with underscores appended until it differs from
    every formula variable.
    """
    taken = set(variables)
    name = "params"
    while name in taken:
        name += "_"
    return name


def to_python_expression(logic: str) -> str:
    """
    Convert formula logic to a Python integer expression.

    Formulas use integer division, so `/` becomes `//`. Everything else,
    including whitespace, is kept as written. `//` floors, so a negative
    quotient with a remainder rounds down (-7 / 2 gives -4).
    """
    return re.sub(r"(?<!/)/(?!/)", "//", logic)


def generate_function(desc: FormulaDescriptor) -> str:
    """
    Generate one standalone function from a descriptor.

    Transforms:
        FormulaDescriptor("Formula_1", "a + b - c", ("a", "b", "c"))

    Into:
        def Formula_1(*params):
            a = params[0]
            b = params[1]
            c = params[2]
            return a + b - c
    """
    summary = " ".join(desc.logic.split())
    params = parameter_name(desc.variables)
    lines = [
        f"# {desc.name} computes: {summary}",
        f"def {desc.name}(*{params}):",
    ]
    for index, var in enumerate(desc.variables):
        lines.append(f"    {var} = {params}[{index}]")
    lines.append(f"    return {to_python_expression(desc.logic)}")
    return "\n".join(lines) + "\n"


class CodeGenerator:
    """
    Generator for a standalone module of formula functions.

    Usage:
        generator = CodeGenerator()
        generator.add_descriptor(descriptor)
        code = generator.generate_module()
    """

    def __init__(self, table_name: str = DEFAULT_TABLE_NAME):
        self.table_name = table_name
        self.descriptors: list[FormulaDescriptor] = []

    def add_descriptor(self, descriptor: FormulaDescriptor) -> None:
        """Add a formula to the batch."""
        self.descriptors.append(descriptor)

    def add_formula(
        self, name: str, logic: str, variables: Iterable[str]
    ) -> None:
        """Add a formula from its parts."""
        self.add_descriptor(build_descriptor(logic, variables, name))

    def generate_module(self) -> str:
        """Generate a complete standalone Python module."""
        if not is_valid_identifier(self.table_name):
            raise EmitError(f"Invalid table name {self.table_name!r}")
        validate_descriptors(self.descriptors)

        lines = [
            '"""',
            "Auto-generated formula functions.",
            "Generated by formula-compile.",
            '"""',
            "",
            "",
        ]

        for desc in self.descriptors:
            lines.append(generate_function(desc))
            lines.append("")

        if self.descriptors:
            lines.append(f"{self.table_name} = {{")
            for desc in self.descriptors:
                lines.append(f'    "{desc.name}": {desc.name},')
            lines.append("}")
        else:
            lines.append(f"{self.table_name} = {{}}")
        lines.append("")

        return "\n".join(lines)


def write_module(code: str, output_path: Union[str, Path]) -> None:
    """
    Write generated code to a file, all or nothing.

    The code goes to a temporary file next to the destination which then
    replaces it, so a failed write never leaves a partial file behind.

    Raises:
        EmitError: If the destination cannot be written
    """
    path = Path(output_path)
    try:
        fd, tmp_name = tempfile.mkstemp(
            dir=path.parent, prefix=f".{path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(code)
            os.chmod(tmp_name, 0o644)
            os.replace(tmp_name, path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise
    except OSError as e:
        raise EmitError(f"Failed to write {path}", e) from e


def emit(
    descriptors: Iterable[FormulaDescriptor],
    output_path: Optional[Union[str, Path]] = None,
    table_name: str = DEFAULT_TABLE_NAME,
) -> str:
    """
    Render descriptors as a Python module and optionally write it.

    Returns:
        The generated module source
    """
    generator = CodeGenerator(table_name=table_name)
    for desc in descriptors:
        generator.add_descriptor(desc)

    code = generator.generate_module()
    if output_path is not None:
        write_module(code, output_path)
    return code
