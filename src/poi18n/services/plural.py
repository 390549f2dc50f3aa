"""Restricted parser and evaluator for gettext ``Plural-Forms`` expressions.

Catalog headers declare plural selection as a C expression over ``n``, e.g.
``nplurals=3; plural=(n==1 ? 0 : n%10>=2 && n%10<=4 ? 1 : 2);``. The grammar
accepted here is limited to what gettext allows: integer literals, ``n``,
parentheses, the unary operators ``! - +``, arithmetic, comparisons, logical
``&&``/``||`` and the ternary operator. The parsed tree is evaluated in
Python with C semantics and rendered back to JavaScript for the vue-i18n
``pluralizationRules`` module, so raw header text is never executed.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterator, Mapping

PLURAL_HEADER_PATTERN = re.compile(
    r"nplurals\s*=\s*(?P<nplurals>[0-9]+).*?plural\s*=\s*(?P<expression>.+)",
    re.DOTALL,
)

_TOKEN_PATTERN = re.compile(
    r"\s*(?:(?P<number>[0-9]+)|(?P<name>[A-Za-z_][A-Za-z0-9_]*)"
    r"|(?P<op>\|\||&&|==|!=|<=|>=|[-+*/%<>!?:()]))"
)

# Binary operators grouped by increasing precedence (C ordering).
_BINARY_LEVELS: tuple[tuple[str, ...], ...] = (
    ("||",),
    ("&&",),
    ("==", "!="),
    ("<", "<=", ">", ">="),
    ("+", "-"),
    ("*", "/", "%"),
)

MODULE_FORMATS = ("commonjs", "esm")
_MODULE_HEADER = "/* eslint-disable no-extra-semi */\n"


class PluralFormsError(ValueError):
    """Raised when a ``Plural-Forms`` header cannot be parsed or evaluated."""


class Expression:
    """Base class for nodes of a parsed plural expression."""

    def evaluate(self, n: int) -> int:
        raise NotImplementedError

    def to_javascript(self) -> str:
        raise NotImplementedError


@dataclass(frozen=True)
class Number(Expression):
    value: int

    def evaluate(self, n: int) -> int:
        return self.value

    def to_javascript(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class Variable(Expression):
    def evaluate(self, n: int) -> int:
        return n

    def to_javascript(self) -> str:
        return "n"


@dataclass(frozen=True)
class Unary(Expression):
    operator: str
    operand: Expression

    def evaluate(self, n: int) -> int:
        value = self.operand.evaluate(n)
        if self.operator == "!":
            return int(not value)
        if self.operator == "-":
            return -value
        return value

    def to_javascript(self) -> str:
        return f"({self.operator}{self.operand.to_javascript()})"


def _c_divide(left: int, right: int) -> int:
    if right == 0:
        raise PluralFormsError("Division by zero in plural expression")
    quotient = abs(left) // abs(right)
    return quotient if (left < 0) == (right < 0) else -quotient


def _c_modulo(left: int, right: int) -> int:
    if right == 0:
        raise PluralFormsError("Division by zero in plural expression")
    return left - right * _c_divide(left, right)


@dataclass(frozen=True)
class Binary(Expression):
    operator: str
    left: Expression
    right: Expression

    def evaluate(self, n: int) -> int:
        op = self.operator
        left = self.left.evaluate(n)
        # && and || short-circuit like C.
        if op == "&&":
            return int(bool(left) and bool(self.right.evaluate(n)))
        if op == "||":
            return int(bool(left) or bool(self.right.evaluate(n)))

        right = self.right.evaluate(n)
        if op == "+":
            return left + right
        if op == "-":
            return left - right
        if op == "*":
            return left * right
        if op == "/":
            return _c_divide(left, right)
        if op == "%":
            return _c_modulo(left, right)
        if op == "==":
            return int(left == right)
        if op == "!=":
            return int(left != right)
        if op == "<":
            return int(left < right)
        if op == "<=":
            return int(left <= right)
        if op == ">":
            return int(left > right)
        if op == ">=":
            return int(left >= right)
        raise PluralFormsError(f"Unsupported operator {op!r}")  # pragma: no cover

    def to_javascript(self) -> str:
        left = self.left.to_javascript()
        right = self.right.to_javascript()
        if self.operator == "/":
            return f"Math.trunc({left} / {right})"
        if self.operator in ("&&", "||"):
            # JS logical operators yield an operand, C yields 0 or 1.
            return f"(({left} {self.operator} {right}) ? 1 : 0)"
        return f"({left} {self.operator} {right})"


@dataclass(frozen=True)
class Conditional(Expression):
    condition: Expression
    when_true: Expression
    when_false: Expression

    def evaluate(self, n: int) -> int:
        if self.condition.evaluate(n):
            return self.when_true.evaluate(n)
        return self.when_false.evaluate(n)

    def to_javascript(self) -> str:
        return (
            f"({self.condition.to_javascript()} ? {self.when_true.to_javascript()}"
            f" : {self.when_false.to_javascript()})"
        )


def _tokenize(source: str) -> Iterator[str]:
    position = 0
    length = len(source)
    while position < length:
        if source[position:].strip() == "":
            return
        match = _TOKEN_PATTERN.match(source, position)
        if match is None:
            raise PluralFormsError(
                f"Unexpected character {source[position:].strip()[0]!r} in plural expression: {source}"
            )
        if match.group("name") is not None and match.group("name") != "n":
            raise PluralFormsError(
                f"Unknown identifier {match.group('name')!r} in plural expression: {source}"
            )
        yield match.group(match.lastgroup or "op")
        position = match.end()


class _Parser:
    """Recursive-descent parser producing :class:`Expression` trees."""

    def __init__(self, source: str) -> None:
        self.source = source
        self.tokens = list(_tokenize(source))
        self.position = 0

    def _peek(self) -> str | None:
        if self.position < len(self.tokens):
            return self.tokens[self.position]
        return None

    def _advance(self) -> str:
        token = self._peek()
        if token is None:
            raise PluralFormsError(f"Unexpected end of plural expression: {self.source}")
        self.position += 1
        return token

    def _expect(self, expected: str) -> None:
        token = self._advance()
        if token != expected:
            raise PluralFormsError(
                f"Expected {expected!r} but found {token!r} in plural expression: {self.source}"
            )

    def parse(self) -> Expression:
        if not self.tokens:
            raise PluralFormsError("Empty plural expression")
        expression = self._conditional()
        if self._peek() is not None:
            raise PluralFormsError(
                f"Unexpected token {self._peek()!r} in plural expression: {self.source}"
            )
        return expression

    def _conditional(self) -> Expression:
        condition = self._binary(0)
        if self._peek() != "?":
            return condition
        self._advance()
        when_true = self._conditional()
        self._expect(":")
        when_false = self._conditional()
        return Conditional(condition, when_true, when_false)

    def _binary(self, level: int) -> Expression:
        if level == len(_BINARY_LEVELS):
            return self._unary()
        operators = _BINARY_LEVELS[level]
        left = self._binary(level + 1)
        while self._peek() in operators:
            operator = self._advance()
            right = self._binary(level + 1)
            left = Binary(operator, left, right)
        return left

    def _unary(self) -> Expression:
        if self._peek() in ("!", "-", "+"):
            operator = self._advance()
            return Unary(operator, self._unary())
        return self._primary()

    def _primary(self) -> Expression:
        token = self._advance()
        if token == "(":
            inner = self._conditional()
            self._expect(")")
            return inner
        if token == "n":
            return Variable()
        if token.isdigit():
            return Number(int(token))
        raise PluralFormsError(f"Unexpected token {token!r} in plural expression: {self.source}")


def parse_expression(source: str) -> Expression:
    """Parse a bare plural expression such as ``n != 1``."""

    return _Parser(source).parse()


@dataclass(frozen=True)
class PluralRule:
    """Parsed ``Plural-Forms`` header mapping a count to a plural index."""

    nplurals: int
    expression: str
    tree: Expression

    def index(self, n: int) -> int:
        """Return the zero-based plural form index for ``n``."""

        return int(self.tree.evaluate(int(n)))

    def __call__(self, n: int) -> int:
        return self.index(n)

    def to_javascript(self) -> str:
        """Render the rule as a vue-i18n compatible ``function (n)`` source."""

        return f"function (n) {{ const rv = {self.tree.to_javascript()}; return Number(rv); }}"


def parse_plural_forms(header: str | None) -> PluralRule:
    """Parse a ``nplurals=N; plural=EXPR`` header into a :class:`PluralRule`."""

    match = PLURAL_HEADER_PATTERN.search(header or "")
    if match is None:
        raise PluralFormsError(f"Cannot parse plural definition: {header}")

    expression = match.group("expression").strip().rstrip(";").strip()
    return PluralRule(
        nplurals=int(match.group("nplurals")),
        expression=expression,
        tree=parse_expression(expression),
    )


def render_plural_module(rules: Mapping[str, PluralRule], module_format: str = "commonjs") -> str:
    """Render a JavaScript module exporting ``{locale: pluralFunction}``."""

    if module_format not in MODULE_FORMATS:
        raise ValueError(f"Unsupported module format: {module_format}")

    opener = "module.exports = {\n" if module_format == "commonjs" else "export default {\n"
    body = ",\n".join(
        f'  "{locale}": {rule.to_javascript()}' for locale, rule in rules.items()
    )
    return f"{_MODULE_HEADER}{opener}{body}\n}};\n"


__all__ = [
    "Binary",
    "Conditional",
    "Expression",
    "MODULE_FORMATS",
    "Number",
    "PluralFormsError",
    "PluralRule",
    "Unary",
    "Variable",
    "parse_expression",
    "parse_plural_forms",
    "render_plural_module",
]
