"""
Process formula evaluator.

Formulas are plain arithmetic over the process entry's own variable names:

    numbers      12, 0.5, .25, 1e3
    names        drawingLength, rate_per_m  (case-sensitive)
    operators    + - * / %   and unary + -
    grouping     ( ... )

The text is tokenized, parsed by recursive descent into a small tree, and
the tree is interpreted against a name → float mapping. Nothing in the
formula can reach Python itself.

`%` is a remainder with the sign of the dividend (math.fmod).
"""

import logging
import math
import re
from typing import Dict, Iterable, List, NamedTuple, Optional, Tuple, Union

logger = logging.getLogger(__name__)


class FormulaError(ValueError):
    """Raised for malformed formulas and for results that are not finite numbers."""


class Token(NamedTuple):
    kind: str    # 'number' | 'name' | 'op' | 'lparen' | 'rparen'
    text: str
    pos: int


_TOKEN_RE = re.compile(r"""
    (?P<ws>\s+)
  | (?P<number>(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)
  | (?P<name>[A-Za-z_][A-Za-z0-9_]*)
  | (?P<op>[-+*/%])
  | (?P<lparen>\()
  | (?P<rparen>\))
""", re.VERBOSE)


def tokenize(formula: str) -> List[Token]:
    tokens = []
    pos = 0
    while pos < len(formula):
        match = _TOKEN_RE.match(formula, pos)
        if match is None:
            raise FormulaError(f"Unexpected character {formula[pos]!r} at position {pos}")
        kind = match.lastgroup
        if kind != "ws":
            tokens.append(Token(kind, match.group(), pos))
        pos = match.end()
    return tokens


# --- Syntax tree ---

class Number(NamedTuple):
    value: float


class Name(NamedTuple):
    name: str


class Unary(NamedTuple):
    op: str
    operand: "Node"


class Binary(NamedTuple):
    op: str
    left: "Node"
    right: "Node"


Node = Union[Number, Name, Unary, Binary]


class _Parser:
    """
    expr   := term (('+' | '-') term)*
    term   := unary (('*' | '/' | '%') unary)*
    unary  := ('+' | '-') unary | atom
    atom   := number | name | '(' expr ')'
    """

    def __init__(self, tokens: List[Token]):
        self._tokens = tokens
        self._pos = 0

    def _peek(self) -> Optional[Token]:
        if self._pos < len(self._tokens):
            return self._tokens[self._pos]
        return None

    def _next(self) -> Token:
        tok = self._peek()
        if tok is None:
            raise FormulaError("Unexpected end of formula")
        self._pos += 1
        return tok

    def _at_op(self, ops: str) -> bool:
        tok = self._peek()
        return tok is not None and tok.kind == "op" and tok.text in ops

    def parse(self) -> Node:
        node = self._expr()
        tok = self._peek()
        if tok is not None:
            raise FormulaError(f"Unexpected {tok.text!r} at position {tok.pos}")
        return node

    def _expr(self) -> Node:
        node = self._term()
        while self._at_op("+-"):
            op = self._next().text
            node = Binary(op, node, self._term())
        return node

    def _term(self) -> Node:
        node = self._unary()
        while self._at_op("*/%"):
            op = self._next().text
            node = Binary(op, node, self._unary())
        return node

    def _unary(self) -> Node:
        if self._at_op("+-"):
            op = self._next().text
            return Unary(op, self._unary())
        return self._atom()

    def _atom(self) -> Node:
        tok = self._next()
        if tok.kind == "number":
            return Number(float(tok.text))
        if tok.kind == "name":
            return Name(tok.text)
        if tok.kind == "lparen":
            node = self._expr()
            closing = self._next()
            if closing.kind != "rparen":
                raise FormulaError(f"Expected ')' at position {closing.pos}")
            return node
        raise FormulaError(f"Unexpected {tok.text!r} at position {tok.pos}")


def parse(formula: str) -> Node:
    return _Parser(tokenize(formula)).parse()


def _interpret(node: Node, scope: Dict[str, float]) -> float:
    if isinstance(node, Number):
        return node.value
    if isinstance(node, Name):
        if node.name not in scope:
            raise FormulaError(f"Unknown variable '{node.name}'")
        return scope[node.name]
    if isinstance(node, Unary):
        value = _interpret(node.operand, scope)
        return -value if node.op == "-" else value

    left = _interpret(node.left, scope)
    right = _interpret(node.right, scope)
    if node.op == "+":
        return left + right
    if node.op == "-":
        return left - right
    if node.op == "*":
        return left * right
    if right == 0:
        raise FormulaError("Division by zero")
    if node.op == "/":
        return left / right
    return math.fmod(left, right)


def names_in(formula: str) -> set:
    """Variable names referenced by a formula."""
    return {tok.text for tok in tokenize(formula) if tok.kind == "name"}


_LEADING_NUMBER_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def coerce_number(value) -> float:
    """
    Numeric value of a variable. Text is read up to its first non-numeric
    character ("12 m" is 12); anything without a leading number counts as 0.
    """
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            return 0.0
    else:
        match = _LEADING_NUMBER_RE.match(str(value).strip())
        if match is None:
            return 0.0
        number = float(match.group())
    return number if math.isfinite(number) else 0.0


def build_scope(variables: Iterable) -> Dict[str, float]:
    """name → numeric value for a list of process variables."""
    return {v.name: coerce_number(v.value) for v in variables if v.name}


def evaluate(formula: str, scope: Dict[str, float]) -> float:
    """Evaluate a formula against a scope. Raises FormulaError."""
    if not formula or not formula.strip():
        return 0.0
    try:
        result = _interpret(parse(formula), scope)
    except (OverflowError, RecursionError) as e:
        raise FormulaError(f"Formula could not be evaluated: {e}") from e
    if not math.isfinite(result):
        raise FormulaError("Formula result is not a finite number")
    return result


def evaluate_formula(formula: str, variables: Iterable) -> dict:
    """
    Evaluate a process formula with its variables.

    Returns {"ok": True, "value": float} or {"ok": False, "error": str}.
    Never raises for bad formulas.
    """
    try:
        value = evaluate(formula or "", build_scope(variables))
    except FormulaError as e:
        logger.debug("Formula %r failed: %s", formula, e)
        return {"ok": False, "error": str(e)}
    return {"ok": True, "value": value}


def preview_formula(formula: str, variables: Iterable) -> Tuple[Optional[float], Optional[str]]:
    """
    Editor preview using each variable's default_value.
    Returns (value, None), (None, error) or (None, None) for an empty formula.
    """
    if not formula or not formula.strip():
        return None, None
    scope = {(v.name or "_"): coerce_number(v.default_value) for v in variables}
    try:
        return evaluate(formula, scope), None
    except FormulaError as e:
        return None, str(e)
