"""Unit tests for output artifact writers."""

from __future__ import annotations

import json
from pathlib import Path

from poi18n.services.emitter import (
    LocaleMessages,
    render_json,
    write_messages_dir,
    write_messages_file,
    write_plural_rules,
)
from poi18n.services.plural import parse_plural_forms


def _results() -> dict[str, LocaleMessages]:
    return {
        "cs": LocaleMessages(
            locale="cs",
            messages={"about": "O aplikaci", "gamemode": {"game": {"run": "Spustit"}}},
            plural_rule=parse_plural_forms("nplurals=3; plural=(n==1) ? 0 : (n>=2 && n<=4) ? 1 : 2;"),
        ),
        "en": LocaleMessages(
            locale="en",
            messages={"about": "About"},
            plural_rule=parse_plural_forms("nplurals=2; plural=(n != 1);"),
        ),
    }


def test_render_json_matches_javascript_layout() -> None:
    assert render_json({"a": {"b": "č"}}) == '{\n  "a": {\n    "b": "č"\n  }\n}'
    assert render_json({}) == "{}"


def test_write_messages_file_creates_parent_directories(tmp_path: Path) -> None:
    target = tmp_path / "nested" / "out" / "messages.json"

    write_messages_file(target, _results())

    payload = json.loads(target.read_text(encoding="utf-8"))
    assert payload == {
        "cs": {"about": "O aplikaci", "gamemode": {"game": {"run": "Spustit"}}},
        "en": {"about": "About"},
    }


def test_write_messages_dir_writes_one_file_per_locale(tmp_path: Path) -> None:
    written = write_messages_dir(tmp_path / "i18n", _results())

    assert sorted(path.name for path in written) == ["cs.json", "en.json"]
    assert (tmp_path / "i18n" / "en.json").read_text(encoding="utf-8") == (
        '{\n  "about": "About"\n}'
    )


def test_write_messages_dir_handles_no_locales(tmp_path: Path) -> None:
    assert write_messages_dir(tmp_path / "empty", {}) == []
    assert (tmp_path / "empty").is_dir()


def test_write_plural_rules_uses_module_format(tmp_path: Path) -> None:
    target = tmp_path / "js" / "choices.mjs"

    write_plural_rules(target, _results(), "esm")

    content = target.read_text(encoding="utf-8")
    assert content.startswith("/* eslint-disable no-extra-semi */\nexport default {\n")
    assert '"cs": function (n)' in content
    assert '"en": function (n) { const rv = (n != 1); return Number(rv); }' in content
