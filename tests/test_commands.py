# tests/test_commands.py

from __future__ import annotations

import pytest

from tasklog.cli import main as cli_main
from tasklog.cli.bootstrap import create_engine
from tasklog.cli.commands import CommandRegistry, TaskArg, format_minutes, registry, render_totals
from tasklog.tracker.models import TaskTotal

from .fakes import FakeClock


@pytest.fixture(autouse=True)
def _no_logging_setup(monkeypatch) -> None:
    # setup_logging rewires root handlers; keep pytest's capture intact.
    monkeypatch.setattr(cli_main, "setup_logging", lambda **_: None)


def test_format_minutes() -> None:
    assert format_minutes(0) == "0h 0m"
    assert format_minutes(59) == "0h 59m"
    assert format_minutes(125) == "2h 5m"


def test_render_totals_table() -> None:
    out = render_totals([TaskTotal("writing", 90), TaskTotal("io", 5)])
    assert out.splitlines() == [
        "TASK     TIME",
        "writing  1h 30m",
        "io       0h 5m",
    ]
    assert "No tasks yet" in render_totals([])


def test_registry_routes_to_handler(settings) -> None:
    reg = CommandRegistry()
    seen: list[str | None] = []

    def handler(engine, task):
        seen.append(task)
        return "ok"

    reg.register("Ping", handler, "ping", task_arg=TaskArg.OPTIONAL)
    engine = create_engine(settings=settings)

    assert reg.handle(engine, "ping", "x") == "ok"
    assert seen == ["x"]
    assert reg.commands() == [("ping", "ping", TaskArg.OPTIONAL)]
    assert "Unknown command" in reg.handle(engine, "nope")


def test_default_registry_flow(settings) -> None:
    clock = FakeClock()
    engine = create_engine(settings=settings, clock=clock)
    assert settings.store_path.parent.is_dir()

    assert registry.handle(engine, "add", "Writing") == "Added task 'writing'."
    assert registry.handle(engine, "status", None) == "No task running."
    assert registry.handle(engine, "start", "writing").startswith("Started 'writing' at 2026-01-05 09:00:00")

    clock.advance(90)
    assert "(0h 1m 30s)" in registry.handle(engine, "status", None)
    assert registry.handle(engine, "stop", None) == "Stopped 'writing' after 0h 1m 30s."
    assert registry.handle(engine, "log", None).splitlines()[1] == "writing  0h 1m"
    assert registry.handle(engine, "log", "all") == registry.handle(engine, "log", None)
    assert registry.handle(engine, "delete", "writing") == (
        "Deleted task 'writing' and 1 recorded session(s)."
    )


def test_main_success_and_recoverable_errors(settings, capsys) -> None:
    assert cli_main.main(["add", "Writing"], settings=settings) == cli_main.EXIT_OK
    assert capsys.readouterr().out.strip() == "Added task 'writing'."

    assert cli_main.main(["add", "writing"], settings=settings) == cli_main.EXIT_ERROR
    assert "already exists" in capsys.readouterr().err

    assert cli_main.main(["stop"], settings=settings) == cli_main.EXIT_ERROR
    assert capsys.readouterr().err.startswith("Error: No session is running.")

    assert cli_main.main(["log", "unknown"], settings=settings) == cli_main.EXIT_ERROR
    assert "not found" in capsys.readouterr().err

    assert cli_main.main(["log"], settings=settings) == cli_main.EXIT_OK
    assert "writing" in capsys.readouterr().out


def test_main_corrupt_store_is_fatal(settings, capsys) -> None:
    settings.store_path.parent.mkdir(parents=True)
    settings.store_path.write_text("{broken", "utf-8")

    assert cli_main.main(["log"], settings=settings) == cli_main.EXIT_FATAL
    assert "Corrupt tracker data" in capsys.readouterr().err


def test_main_unreadable_store_is_fatal(settings, capsys) -> None:
    # a directory where the tracker file should be
    settings.store_path.mkdir(parents=True)

    assert cli_main.main(["log"], settings=settings) == cli_main.EXIT_FATAL
    assert "Failed to read tracker data" in capsys.readouterr().err


def test_main_usage_errors_exit_2(settings) -> None:
    with pytest.raises(SystemExit) as ei:
        cli_main.main([], settings=settings)
    assert ei.value.code == 2

    with pytest.raises(SystemExit) as ei:
        cli_main.main(["add"], settings=settings)
    assert ei.value.code == 2
