"""Unit tests for debounced, single-flight re-runs."""

from __future__ import annotations

import threading
import time
from pathlib import Path

from poi18n.services.watcher import CatalogChangeHandler, DebouncedRunner, static_root


def _wait_for(predicate, timeout: float = 5.0) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


def test_burst_of_triggers_runs_once() -> None:
    calls: list[float] = []
    runner = DebouncedRunner(lambda: calls.append(time.monotonic()), delay=0.05)

    for _ in range(5):
        runner.trigger()

    assert _wait_for(lambda: len(calls) == 1)
    time.sleep(0.2)
    assert len(calls) == 1


def test_trigger_during_run_schedules_one_follow_up() -> None:
    started = threading.Event()
    release = threading.Event()
    active = 0
    max_active = 0
    calls = 0
    lock = threading.Lock()

    def action() -> None:
        nonlocal active, max_active, calls
        with lock:
            active += 1
            calls += 1
            max_active = max(max_active, active)
        started.set()
        release.wait(5)
        with lock:
            active -= 1

    runner = DebouncedRunner(action, delay=0.01)
    runner.trigger()
    assert started.wait(5)

    for _ in range(3):
        runner.trigger()
        time.sleep(0.05)

    release.set()

    assert _wait_for(lambda: calls == 2 and not runner.running)
    time.sleep(0.1)
    assert calls == 2
    assert max_active == 1


def test_failing_action_does_not_stop_future_runs() -> None:
    calls: list[int] = []

    def action() -> None:
        calls.append(1)
        if len(calls) == 1:
            raise RuntimeError("boom")

    runner = DebouncedRunner(action, delay=0.01)
    runner.trigger()
    assert _wait_for(lambda: len(calls) == 1 and not runner.running)

    runner.trigger()
    assert _wait_for(lambda: len(calls) == 2)


def test_cancel_discards_pending_trigger() -> None:
    calls: list[int] = []
    runner = DebouncedRunner(lambda: calls.append(1), delay=0.2)

    runner.trigger()
    runner.cancel()
    time.sleep(0.3)

    assert calls == []


def test_static_root_strips_glob_components() -> None:
    assert static_root("locales/*.po") == Path("locales")
    assert static_root("src/**/locales/*.po") == Path("src")
    assert static_root("en.po") == Path(".")


def test_handler_matches_only_catalog_files(tmp_path: Path) -> None:
    catalog = tmp_path / "en.po"
    catalog.write_text("", encoding="utf-8")
    other = tmp_path / "notes.txt"
    other.write_text("", encoding="utf-8")
    runner = DebouncedRunner(lambda: None)

    handler = CatalogChangeHandler([str(tmp_path / "*.po")], runner)

    assert handler.matches(str(catalog))
    assert not handler.matches(str(other))
