"""AST-based formula parsing and variable extraction.

Uses Python's ast module to parse formula text, then converts the accepted
arithmetic subset into a small expression tree of its own.
"""

import ast
import re
from dataclasses import dataclass
from typing import Any, Union

# Lexical whitelist: identifiers, integer literals, operators, parens, spaces
ALLOWED_CHARACTERS = re.compile(r"^[\w\s+\-*/()]*$")

BINARY_OPERATORS = {
    ast.Add: "+",
    ast.Sub: "-",
    ast.Mult: "*",
    ast.Div: "/",
}

UNARY_OPERATORS = {
    ast.UAdd: "+",
    ast.USub: "-",
}


class ParseError(ValueError):
    """A formula could not be parsed."""

    def __init__(self, text: str, cause: Any):
        self.text = text
        self.cause = cause
        super().__init__(f"Failed to parse formula {text!r}: {cause}")


@dataclass(frozen=True)
class Number:
    """Integer literal leaf."""

    value: int


@dataclass(frozen=True)
class Identifier:
    """Variable reference leaf."""

    name: str


@dataclass(frozen=True)
class UnaryOp:
    """Unary plus or minus applied to an operand."""

    op: str
    operand: "Expr"


@dataclass(frozen=True)
class BinaryOp:
    """Binary arithmetic node."""

    op: str
    left: "Expr"
    right: "Expr"


Expr = Union[Number, Identifier, UnaryOp, BinaryOp]


class UnsupportedSyntax(Exception):
    """Raised internally when the Python AST leaves the formula grammar."""


class ExpressionBuilder(ast.NodeVisitor):
    """Convert a Python expression AST into an Expr tree."""

    def visit_Expression(self, node: ast.Expression) -> Expr:
        return self.visit(node.body)

    def visit_BinOp(self, node: ast.BinOp) -> Expr:
        op = BINARY_OPERATORS.get(type(node.op))
        if op is None:
            raise UnsupportedSyntax(
                f"unsupported operator {type(node.op).__name__}"
            )
        return BinaryOp(op, self.visit(node.left), self.visit(node.right))

    def visit_UnaryOp(self, node: ast.UnaryOp) -> Expr:
        op = UNARY_OPERATORS.get(type(node.op))
        if op is None:
            raise UnsupportedSyntax(
                f"unsupported operator {type(node.op).__name__}"
            )
        return UnaryOp(op, self.visit(node.operand))

    def visit_Name(self, node: ast.Name) -> Expr:
        return Identifier(node.id)

    def visit_Constant(self, node: ast.Constant) -> Expr:
        # bool is an int subclass; True/False are not integer literals here
        if isinstance(node.value, bool) or not isinstance(node.value, int):
            raise UnsupportedSyntax(f"unsupported literal {node.value!r}")
        return Number(node.value)

    def generic_visit(self, node: ast.AST) -> Any:
        raise UnsupportedSyntax(f"unsupported syntax {type(node).__name__}")


class VariableVisitor:
    """Collect identifier names in first-seen, left-to-right order."""

    def __init__(self):
        self.variables: list[str] = []
        self._seen: set[str] = set()

    def visit(self, node: Expr) -> None:
        if isinstance(node, Identifier):
            if node.name not in self._seen:
                self._seen.add(node.name)
                self.variables.append(node.name)
        elif isinstance(node, UnaryOp):
            self.visit(node.operand)
        elif isinstance(node, BinaryOp):
            self.visit(node.left)
            self.visit(node.right)


def parse_formula(text: str) -> Expr:
    """Parse formula text into an expression tree.

    Args:
        text: Arithmetic expression over identifiers and integer literals

    Returns:
        Root node of the parsed expression

    Raises:
        ParseError: If the text is empty or outside the formula grammar
    """
    if not text or not text.strip():
        raise ParseError(text, "empty formula")

    if "\n" in text or "\r" in text:
        raise ParseError(text, "formula must be a single line")

    if not ALLOWED_CHARACTERS.match(text):
        bad = sorted({ch for ch in text if not ALLOWED_CHARACTERS.match(ch)})
        raise ParseError(text, f"invalid token(s) {''.join(bad)!r}")

    try:
        tree = ast.parse(text.strip(), mode="eval")
    except (SyntaxError, ValueError) as e:
        raise ParseError(text, e) from e

    try:
        return ExpressionBuilder().visit(tree)
    except UnsupportedSyntax as e:
        raise ParseError(text, e) from e


def extract_variables(tree: Expr) -> list[str]:
    """Extract distinct variable names from an expression tree.

    Order is first appearance in a left-to-right traversal, which is the
    positional binding order of the generated function's arguments.
    """
    visitor = VariableVisitor()
    visitor.visit(tree)
    return visitor.variables


def extract_formula_variables(text: str) -> list[str]:
    """Parse formula text and return its variables in binding order."""
    return extract_variables(parse_formula(text))
