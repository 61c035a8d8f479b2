"""
Minimal Expression Evaluator for card text.

Card text is written as a template with {expr} placeholders, e.g.
"When attacking, inflict {power} damage to you." The placeholders are
evaluated against the card's current values.

Supports:
- Literals: integers, true, false
- Names and dotted paths: power, card.cost, player.life
- Arithmetic: +, -, *, / (integer division, truncating toward zero)
- Comparisons: ==, !=, <, >, <=, >=
- Parentheses and unary minus

Values are 32-bit signed integers. Every node costs one step and the
evaluation aborts past max_steps. Errors are raised as ExpressionError
subclasses; render() catches them and blanks the placeholder so a bad
template never stops a match.

parse_text() splits rendered text into plain text, <<card name>>,
[[keyword]] and signed number sections for clients that style them.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any
import logging
import re

from .errors import (
    ExpressionDivisionByZeroError,
    ExpressionError,
    ExpressionOverflowError,
    ExpressionSyntaxError,
    StepLimitExceededError,
    UndefinedVariableError,
)

logger = logging.getLogger(__name__)

DEFAULT_MAX_STEPS = 256
INT_MIN = -(2 ** 31)
INT_MAX = 2 ** 31 - 1

_TOKEN_RE = re.compile(r"\s*(?:(\d+)|([A-Za-z_][A-Za-z0-9_.]*)|(==|!=|<=|>=|[-+*/()<>]))")
_PLACEHOLDER_RE = re.compile(r"\{([^{}]*)\}")
_SECTION_RE = re.compile(r"<<(.*?)>>|\[\[(.*?)\]\]|([+-]?\d+)")

_COMPARISONS = {"==", "!=", "<", ">", "<=", ">="}


@dataclass
class ExpressionContext:
    """Variables visible to an expression."""
    variables: dict[str, Any] = field(default_factory=dict)

    def get_variable(self, path: str) -> Any:
        parts = path.split(".")
        if parts[0] not in self.variables:
            raise UndefinedVariableError(path)
        obj = self.variables[parts[0]]
        for part in parts[1:]:
            if isinstance(obj, dict) and part in obj:
                obj = obj[part]
            elif hasattr(obj, part):
                obj = getattr(obj, part)
            else:
                raise UndefinedVariableError(path)
        return obj

    def set_variable(self, name: str, value: Any):
        self.variables[name] = value


class ExpressionEvaluator:
    """
    Evaluates placeholder expressions.

    Grammar:
        comparison := sum (CMP sum)?
        sum        := term (("+" | "-") term)*
        term       := unary (("*" | "/") unary)*
        unary      := "-" unary | primary
        primary    := NUMBER | NAME | "(" comparison ")"
    """

    def __init__(self, max_steps: int = DEFAULT_MAX_STEPS):
        self.max_steps = max_steps

    def evaluate(self, expr: str | int | bool, context: ExpressionContext) -> int | bool:
        if isinstance(expr, (bool, int)):
            return expr
        parser = _Parser(_tokenize(expr), context, self.max_steps)
        return parser.parse()

    def evaluate_condition(self, expr: str | int | bool, context: ExpressionContext) -> bool:
        return bool(self.evaluate(expr, context))


class _Parser:
    def __init__(self, tokens: list[str], context: ExpressionContext, max_steps: int):
        self.tokens = tokens
        self.pos = 0
        self.context = context
        self.max_steps = max_steps
        self.steps = 0

    def parse(self) -> int | bool:
        if not self.tokens:
            raise ExpressionSyntaxError("Empty expression")
        value = self._comparison()
        if self.pos != len(self.tokens):
            raise ExpressionSyntaxError(f"Unexpected token: {self.tokens[self.pos]}")
        return value

    def _step(self):
        self.steps += 1
        if self.steps > self.max_steps:
            raise StepLimitExceededError(self.max_steps)

    def _peek(self) -> str | None:
        return self.tokens[self.pos] if self.pos < len(self.tokens) else None

    def _next(self) -> str:
        token = self._peek()
        if token is None:
            raise ExpressionSyntaxError("Unexpected end of expression")
        self.pos += 1
        return token

    def _comparison(self) -> int | bool:
        self._step()
        left = self._sum()
        if self._peek() in _COMPARISONS:
            op = self._next()
            right = self._sum()
            return _compare(left, right, op)
        return left

    def _sum(self) -> int:
        self._step()
        value = self._term()
        while self._peek() in ("+", "-"):
            op = self._next()
            right = self._term()
            value = _checked(_integer(value) + _integer(right) if op == "+" else _integer(value) - _integer(right))
        return value

    def _term(self) -> int:
        self._step()
        value = self._unary()
        while self._peek() in ("*", "/"):
            op = self._next()
            right = self._unary()
            if op == "*":
                value = _checked(_integer(value) * _integer(right))
            else:
                value = _divide(_integer(value), _integer(right))
        return value

    def _unary(self) -> int:
        self._step()
        if self._peek() == "-":
            self._next()
            return _checked(-_integer(self._unary()))
        return self._primary()

    def _primary(self) -> int | bool:
        self._step()
        token = self._next()
        if token.isdigit():
            return _checked(int(token))
        if token == "(":
            value = self._comparison()
            if self._next() != ")":
                raise ExpressionSyntaxError("Expected ')'")
            return value
        if token == "true":
            return True
        if token == "false":
            return False
        if token[0].isalpha() or token[0] == "_":
            return self.context.get_variable(token)
        raise ExpressionSyntaxError(f"Unexpected token: {token}")


def _tokenize(expr: str) -> list[str]:
    tokens = []
    pos = 0
    text = expr.rstrip()
    while pos < len(text):
        match = _TOKEN_RE.match(text, pos)
        if match is None or match.end() == pos:
            raise ExpressionSyntaxError(f"Invalid character at {pos}: {text[pos:pos + 1]!r}")
        tokens.append(next(group for group in match.groups() if group is not None))
        pos = match.end()
    return tokens


def _integer(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ExpressionSyntaxError(f"Expected an integer, got {value!r}")
    return value


def _checked(value: int) -> int:
    if value < INT_MIN or value > INT_MAX:
        raise ExpressionOverflowError(f"Integer overflow: {value}")
    return value


def _divide(left: int, right: int) -> int:
    if right == 0:
        raise ExpressionDivisionByZeroError("Division by zero")
    quotient = abs(left) // abs(right)
    return _checked(quotient if (left < 0) == (right < 0) else -quotient)


def _compare(left: Any, right: Any, op: str) -> bool:
    if op == "==":
        return left == right
    if op == "!=":
        return left != right
    left, right = _integer(left), _integer(right)
    if op == "<":
        return left < right
    if op == ">":
        return left > right
    if op == "<=":
        return left <= right
    return left >= right


def _format(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def render(template: str, variables: dict[str, Any] | None = None, max_steps: int = DEFAULT_MAX_STEPS) -> str:
    """
    Substitute every {expr} placeholder in template.

    Never raises: a placeholder that fails to evaluate renders as "".
    """
    evaluator = ExpressionEvaluator(max_steps)
    context = ExpressionContext(dict(variables or {}))

    def substitute(match: re.Match) -> str:
        try:
            return _format(evaluator.evaluate(match.group(1), context))
        except ExpressionError as error:
            logger.warning("Cannot render {%s}: %s", match.group(1), error.message)
            return ""

    return _PLACEHOLDER_RE.sub(substitute, template)


# Convenience function
def evaluate_expression(expr: str | int | bool, variables: dict[str, Any] | None = None) -> int | bool:
    return ExpressionEvaluator().evaluate(expr, ExpressionContext(dict(variables or {})))


class SectionKind(Enum):
    TEXT = "text"
    CARD = "card"
    KEYWORD = "keyword"
    NUMBER = "number"


@dataclass(frozen=True)
class TextSection:
    kind: SectionKind
    value: str | int


def parse_text(text: str) -> list[TextSection]:
    """Split text into sections: "a <<Card>> with [[toxic]]" -> text, card, text, keyword."""
    sections = []
    pos = 0
    for match in _SECTION_RE.finditer(text):
        if match.start() > pos:
            sections.append(TextSection(SectionKind.TEXT, text[pos:match.start()]))
        card, keyword, number = match.groups()
        if card is not None:
            sections.append(TextSection(SectionKind.CARD, card))
        elif keyword is not None:
            sections.append(TextSection(SectionKind.KEYWORD, keyword))
        else:
            sections.append(TextSection(SectionKind.NUMBER, int(number)))
        pos = match.end()
    if pos < len(text):
        sections.append(TextSection(SectionKind.TEXT, text[pos:]))
    return sections
