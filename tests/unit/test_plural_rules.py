"""Unit tests for the plural expression parser and evaluator."""

from __future__ import annotations

import json
import shutil
import subprocess

import pytest

from poi18n.services.plural import (
    PluralFormsError,
    parse_expression,
    parse_plural_forms,
    render_plural_module,
)

CZECH = (
    "nplurals=4; plural=(n == 1 && n % 1 == 0) ? 0 : "
    "(n >= 2 && n <= 4 && n % 1 == 0) ? 1: (n % 1 != 0 ) ? 2 : 3;"
)
POLISH = (
    "nplurals=3; plural=(n==1 ? 0 : n%10>=2 && n%10<=4 && (n%100<10 || n%100>=20) ? 1 : 2);"
)


def test_czech_rule_selects_expected_forms() -> None:
    rule = parse_plural_forms(CZECH)

    assert rule.nplurals == 4
    assert [rule(count) for count in (0, 1, 2, 4, 5)] == [3, 0, 1, 1, 3]


def test_simple_ternary_header_from_documentation() -> None:
    rule = parse_plural_forms("nplurals=4; plural=(n==1)?0:(n>=2&&n<=4)?1:0")

    assert [rule(0), rule(1), rule(2), rule(5)] == [0, 0, 1, 0]


@pytest.mark.parametrize(
    ("count", "expected"),
    [(1, 0), (2, 1), (4, 1), (5, 2), (12, 2), (14, 2), (22, 1), (25, 2), (112, 2)],
)
def test_polish_rule_matches_gettext(count: int, expected: int) -> None:
    assert parse_plural_forms(POLISH)(count) == expected


def test_boolean_expression_is_coerced_to_index() -> None:
    rule = parse_plural_forms("nplurals=2; plural=n != 1;")

    assert rule.expression == "n != 1"
    assert rule(1) == 0
    assert rule(3) == 1
    assert isinstance(rule(3), int)


def test_single_form_languages_always_return_zero() -> None:
    rule = parse_plural_forms("nplurals=1; plural=0;")

    assert {rule(count) for count in range(10)} == {0}


def test_division_and_modulo_follow_c_semantics() -> None:
    assert parse_expression("n / 3").evaluate(7) == 2
    assert parse_expression("-n / 3").evaluate(7) == -2
    assert parse_expression("-n % 3").evaluate(7) == -1
    assert parse_expression("!n").evaluate(0) == 1


def test_ternary_is_right_associative() -> None:
    tree = parse_expression("n == 0 ? 0 : n == 1 ? 1 : 2")

    assert [tree.evaluate(count) for count in (0, 1, 7)] == [0, 1, 2]


@pytest.mark.parametrize(
    "header",
    [
        None,
        "",
        "plural=(n != 1);",
        "nplurals=2;",
    ],
)
def test_malformed_headers_raise(header: str | None) -> None:
    with pytest.raises(PluralFormsError, match="Cannot parse plural definition"):
        parse_plural_forms(header)


@pytest.mark.parametrize(
    "expression",
    [
        "n != 1; process.exit()",
        "__import__('os')",
        "n ** 2",
        "(n != 1",
        "n ? 1",
        "x + 1",
    ],
)
def test_expressions_outside_the_grammar_are_rejected(expression: str) -> None:
    with pytest.raises(PluralFormsError):
        parse_expression(expression)


def test_division_by_zero_is_reported() -> None:
    rule = parse_plural_forms("nplurals=2; plural=1 % (n - n);")

    with pytest.raises(PluralFormsError, match="Division by zero"):
        rule(3)


def test_javascript_rendering_wraps_expression() -> None:
    rule = parse_plural_forms("nplurals=2; plural=(n != 1);")

    assert rule.to_javascript() == "function (n) { const rv = (n != 1); return Number(rv); }"


def test_javascript_rendering_truncates_division() -> None:
    rule = parse_plural_forms("nplurals=2; plural=n/10 == 1 ? 0 : 1;")

    assert "Math.trunc(n / 10)" in rule.to_javascript()


def test_javascript_rendering_normalises_logical_operators() -> None:
    rule = parse_plural_forms("nplurals=3; plural=n==0 ? 0 : (n>1 && 2);")

    assert [rule(count) for count in range(4)] == [0, 0, 1, 1]
    assert rule.to_javascript() == (
        "function (n) { const rv = ((n == 0) ? 0 : (((n > 1) && 2) ? 1 : 0)); "
        "return Number(rv); }"
    )


@pytest.mark.skipif(shutil.which("node") is None, reason="node is not installed")
@pytest.mark.parametrize(
    "header",
    [
        CZECH,
        POLISH,
        "nplurals=3; plural=n==0 ? 0 : (n>1 && 2);",
        "nplurals=2; plural=(n || 0) + !n;",
        "nplurals=3; plural=n%10==1 && n%100!=11 ? 0 : n/10 == 1 ? 2 : 1;",
    ],
)
def test_javascript_rendering_agrees_with_evaluator(header: str) -> None:
    rule = parse_plural_forms(header)
    counts = list(range(0, 30)) + [101, 111, 112, 1000]
    script = (
        f"const f = {rule.to_javascript()};\n"
        f"console.log(JSON.stringify({json.dumps(counts)}.map(f)));\n"
    )

    completed = subprocess.run(
        ["node", "-e", script], capture_output=True, text=True, check=True, timeout=30
    )

    assert json.loads(completed.stdout) == [rule(count) for count in counts]


def test_render_plural_module_commonjs_and_esm() -> None:
    rules = {
        "en": parse_plural_forms("nplurals=2; plural=(n != 1);"),
        "ko": parse_plural_forms("nplurals=1; plural=0;"),
    }

    commonjs = render_plural_module(rules)
    esm = render_plural_module(rules, "esm")

    assert commonjs == (
        "/* eslint-disable no-extra-semi */\n"
        "module.exports = {\n"
        '  "en": function (n) { const rv = (n != 1); return Number(rv); },\n'
        '  "ko": function (n) { const rv = 0; return Number(rv); }\n'
        "};\n"
    )
    assert esm.startswith("/* eslint-disable no-extra-semi */\nexport default {\n")
    assert esm.endswith("\n};\n")


def test_render_plural_module_rejects_unknown_format() -> None:
    with pytest.raises(ValueError, match="Unsupported module format"):
        render_plural_module({}, "amd")
