"""Restricted arithmetic grammar: numeric literals, ``+ - * /``, unary sign, parens.

Grammar (standard precedence, left-associative)::

    expr    := term (("+" | "-") term)*
    term    := unary (("*" | "/") unary)*
    unary   := ("-" | "+") unary | primary
    primary := NUMBER | "(" expr ")"

Nothing else is accepted; there is no fallback to general code execution.
"""

from __future__ import annotations

import math
import re

from gridcalc.calc._errors import EvaluationError

_TOKEN_RE = re.compile(
    r"\s*(?:(?P<num>(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)|(?P<op>[-+*/()]))"
)


def tokenize(text: str) -> list[str]:
    tokens: list[str] = []
    pos = 0
    end = len(text.rstrip())
    while pos < end:
        m = _TOKEN_RE.match(text, pos)
        if not m:
            raise EvaluationError(f"Unexpected character {text[pos:].lstrip()[:1]!r} in {text!r}")
        tokens.append(m.group("num") or m.group("op"))
        pos = m.end()
    return tokens


def _divide(lhs: float, rhs: float) -> float:
    """IEEE division: x/0 is a signed infinity and 0/0 is NaN."""
    if rhs != 0:
        return lhs / rhs
    if lhs == 0 or math.isnan(lhs):
        return math.nan
    return math.copysign(math.inf, lhs) * math.copysign(1.0, rhs)


class _Parser:
    __slots__ = ("tokens", "pos", "depth", "max_depth", "source")

    def __init__(self, tokens: list[str], source: str, max_depth: int) -> None:
        self.tokens = tokens
        self.pos = 0
        self.depth = 0
        self.max_depth = max_depth
        self.source = source

    def _peek(self) -> str | None:
        return self.tokens[self.pos] if self.pos < len(self.tokens) else None

    def _take(self) -> str:
        tok = self._peek()
        if tok is None:
            raise EvaluationError(f"Unexpected end of expression: {self.source!r}")
        self.pos += 1
        return tok

    def _enter(self) -> None:
        self.depth += 1
        if self.depth > self.max_depth:
            raise EvaluationError(f"Expression nested too deeply: {self.source!r}")

    def parse(self) -> float:
        value = self._expr()
        if self._peek() is not None:
            raise EvaluationError(f"Unexpected token {self._peek()!r} in {self.source!r}")
        return value

    def _expr(self) -> float:
        value = self._term()
        while self._peek() in ("+", "-"):
            if self._take() == "+":
                value += self._term()
            else:
                value -= self._term()
        return value

    def _term(self) -> float:
        value = self._unary()
        while self._peek() in ("*", "/"):
            op = self._take()
            rhs = self._unary()
            if op == "*":
                value *= rhs
            else:
                value = _divide(value, rhs)
        return value

    def _unary(self) -> float:
        if self._peek() in ("-", "+"):
            self._enter()
            sign = self._take()
            value = self._unary()
            self.depth -= 1
            return -value if sign == "-" else value
        return self._primary()

    def _primary(self) -> float:
        tok = self._take()
        if tok == "(":
            self._enter()
            value = self._expr()
            if self._take() != ")":
                raise EvaluationError(f"Unbalanced parentheses in {self.source!r}")
            self.depth -= 1
            return value
        if tok in ("+", "-", "*", "/", ")"):
            raise EvaluationError(f"Unexpected token {tok!r} in {self.source!r}")
        return float(tok)


def evaluate_arithmetic(text: str, max_length: int = 4096, max_depth: int = 100) -> float:
    """Evaluate *text* under the restricted grammar.

    Raises :class:`EvaluationError` for anything that is not well formed and
    when *text* exceeds the length or nesting bounds.  Division by zero is
    well formed and yields an infinity or NaN.
    """
    if len(text) > max_length:
        raise EvaluationError(f"Expression longer than {max_length} characters")
    tokens = tokenize(text)
    if not tokens:
        raise EvaluationError("Empty expression")
    return _Parser(tokens, text, max_depth).parse()
