"""
formula-compile: Compile arithmetic formulas into named functions.

This package parses small integer formulas, names each distinct formula once,
and generates standalone Python (or Go) source with one function per formula
and a lookup table for dispatching them by name.
"""

__version__ = "0.1.0"

from formula_compile.ast_parser import (
    ParseError,
    extract_formula_variables,
    extract_variables,
    parse_formula,
)
from formula_compile.compiler import (
    CompilationBatch,
    compile_formula,
    compile_formulas,
)
from formula_compile.generator import (
    CodeGenerator,
    EmitError,
    FormulaDescriptor,
    build_descriptor,
    emit,
)
from formula_compile.go_generator import GoCodeGenerator, emit_go
from formula_compile.registry import FormulaRegistry, get_default_registry

__all__ = [
    "ParseError",
    "parse_formula",
    "extract_variables",
    "extract_formula_variables",
    "FormulaRegistry",
    "get_default_registry",
    "FormulaDescriptor",
    "build_descriptor",
    "CodeGenerator",
    "EmitError",
    "emit",
    "GoCodeGenerator",
    "emit_go",
    "CompilationBatch",
    "compile_formula",
    "compile_formulas",
]
