"""
Formula source loading for formula-compile.

This module handles:
1. Parsing JSON arrays of formula strings
2. Parsing plain text with one formula per line
3. Reading either format from a file
"""

import json
from pathlib import Path
from typing import Union

# Sample batch compiled when no formulas are given
SAMPLE_FORMULAS = [
    "a + b - c",
    "a * b + c/d",
    "a + b - c",
    "a + b * c - d",
]


def parse_formula_json(formula_json: str) -> list[str]:
    """
    Parse a JSON array of formula strings.

    Format: ["a + b", "a * b", ...]

    Raises:
        ValueError: If JSON is invalid or not a list of strings
    """
    try:
        formulas = json.loads(formula_json)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid formula JSON: {e}")

    if not isinstance(formulas, list):
        raise ValueError("Formula JSON must be an array of strings")
    for formula in formulas:
        if not isinstance(formula, str):
            raise ValueError(f"Formula must be a string, got {formula!r}")

    return formulas


def parse_formula_lines(text: str) -> list[str]:
    """
    Parse one formula per line.

    Blank lines and lines starting with # are ignored. Each formula is kept
    exactly as written apart from the line ending.
    """
    formulas = []
    for line in text.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        formulas.append(line)
    return formulas


def read_formula_file(path: Union[str, Path]) -> list[str]:
    """
    Read formulas from a file.

    Files whose content starts with `[` are read as JSON, others as one
    formula per line.
    """
    text = Path(path).read_text(encoding="utf-8")
    if text.lstrip().startswith("["):
        return parse_formula_json(text)
    return parse_formula_lines(text)
