"""
Compile batches of formula text into descriptors.

This module handles:
1. Parsing each formula and extracting its variables
2. Naming new formulas through a FormulaRegistry, skipping duplicates
3. Collecting descriptors in input order for a single emission
"""

from dataclasses import dataclass, field
from typing import Callable, Iterable, Optional

from formula_compile.ast_parser import (
    ParseError,
    extract_variables,
    parse_formula,
)
from formula_compile.generator import FormulaDescriptor, build_descriptor
from formula_compile.registry import FormulaRegistry, get_default_registry

Reporter = Callable[[str], None]


@dataclass
class CompilationBatch:
    """Result of compiling a batch of formulas."""

    descriptors: list[FormulaDescriptor] = field(default_factory=list)
    # (formula text, name it already had)
    duplicates: list[tuple[str, str]] = field(default_factory=list)
    errors: list[ParseError] = field(default_factory=list)

    @property
    def names(self) -> list[str]:
        return [desc.name for desc in self.descriptors]


def compile_formula(
    text: str,
    registry: Optional[FormulaRegistry] = None,
) -> tuple[Optional[FormulaDescriptor], str]:
    """
    Compile a single formula.

    The formula is parsed before it is named, so a ParseError never consumes
    a registry counter value.

    Returns:
        Tuple of (descriptor, name). The descriptor is None when the text
        was already named.

    Raises:
        ParseError: If the formula is malformed
    """
    if registry is None:
        registry = get_default_registry()

    variables = extract_variables(parse_formula(text))

    name, is_duplicate = registry.assign_name(text)
    if is_duplicate:
        return None, name

    return build_descriptor(text, variables, name), name


def compile_formulas(
    formulas: Iterable[str],
    registry: Optional[FormulaRegistry] = None,
    skip_errors: bool = False,
    report: Optional[Reporter] = None,
) -> CompilationBatch:
    """
    Compile a batch of formulas in order.

    Args:
        formulas: Formula texts, in the order they should be emitted
        registry: Registry to name formulas with (process-wide by default)
        skip_errors: Record malformed formulas and continue instead of raising
        report: Optional callable receiving duplicate and error notices

    Returns:
        A CompilationBatch with one descriptor per newly named formula

    Raises:
        ParseError: On the first malformed formula, unless skip_errors
    """
    if registry is None:
        registry = get_default_registry()

    batch = CompilationBatch()

    for text in formulas:
        try:
            descriptor, name = compile_formula(text, registry)
        except ParseError as e:
            if report is not None:
                report(f"Error: {e}")
            if not skip_errors:
                raise
            batch.errors.append(e)
            continue

        if descriptor is None:
            if report is not None:
                report(f"Skipping duplicate formula: {text} (already {name})")
            batch.duplicates.append((text, name))
            continue

        batch.descriptors.append(descriptor)

    return batch
