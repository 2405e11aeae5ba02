# src/tasklog/cli/commands.py

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import StrEnum

from ..tracker.engine import TrackerEngine
from ..tracker.models import TaskTotal, format_duration

CommandHandler = Callable[[TrackerEngine, str | None], str]

logger = logging.getLogger(__name__)


class TaskArg(StrEnum):
    """How a command takes its single task-name argument."""

    NONE = "none"
    REQUIRED = "required"
    OPTIONAL = "optional"


class CommandRegistry:
    """Maps command names (add, start, log, ...) to engine-backed handlers."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}
        self._task_arg: dict[str, TaskArg] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        task_arg: TaskArg = TaskArg.NONE,
    ) -> None:
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        self._task_arg[key] = task_arg

    def commands(self) -> list[tuple[str, str, TaskArg]]:
        return [(name, self._help[name], self._task_arg[name]) for name in self._handlers]

    def handle(self, engine: TrackerEngine, name: str, task: str | None = None) -> str:
        """
        Run one command and return the text to print.
        TrackerError from the engine propagates to the caller.
        """
        key = name.lower()
        handler = self._handlers.get(key)
        if not handler:
            return f"Unknown command: {name}. Use --help to list available commands."
        logger.debug("Dispatch command=%s task=%s", key, task)
        return handler(engine, task)


registry = CommandRegistry()


def format_minutes(minutes: int) -> str:
    """Accumulated minutes -> "Hh Mm"."""
    hours, mins = divmod(max(0, int(minutes)), 60)
    return f"{hours}h {mins}m"


def render_totals(totals: list[TaskTotal]) -> str:
    if not totals:
        return "No tasks yet. Add one with: tasklog add <TASK>"
    width = max(len("TASK"), *(len(t.task) for t in totals))
    lines = [f"{'TASK':<{width}}  TIME"]
    for t in totals:
        lines.append(f"{t.task:<{width}}  {format_minutes(t.minutes)}")
    return "\n".join(lines)


def cmd_add(engine: TrackerEngine, task: str | None) -> str:
    subject = engine.add_task(task or "")
    return f"Added task '{subject.task}'."


def cmd_delete(engine: TrackerEngine, task: str | None) -> str:
    subject = engine.delete_task(task or "")
    n = len(subject.sessions)
    if n:
        return f"Deleted task '{subject.task}' and {n} recorded session(s)."
    return f"Deleted task '{subject.task}'."


def cmd_start(engine: TrackerEngine, task: str | None) -> str:
    active = engine.start_task(task or "")
    return f"Started '{active.task}' at {active.started:%Y-%m-%d %H:%M:%S} UTC."


def cmd_stop(engine: TrackerEngine, task: str | None) -> str:
    name, session = engine.stop_task()
    return f"Stopped '{name}' after {session.duration}."


def cmd_log(engine: TrackerEngine, task: str | None) -> str:
    """
    log        -> every task, most time first
    log TASK   -> only TASK
    """
    if task is None or task.strip().lower() == "all":
        return render_totals(engine.query())
    return render_totals(engine.query(task))


def cmd_status(engine: TrackerEngine, task: str | None) -> str:
    active = engine.current()
    if active is None:
        return "No task running."
    elapsed = int((engine.now() - active.started).total_seconds())
    return (
        f"Running: '{active.task}' since {active.started:%Y-%m-%d %H:%M:%S} UTC "
        f"({format_duration(elapsed)})."
    )


registry.register("add", cmd_add, help_text="Add TASK to the tracker.", task_arg=TaskArg.REQUIRED)
registry.register(
    "delete", cmd_delete, help_text="Delete TASK and its history.", task_arg=TaskArg.REQUIRED
)
registry.register("start", cmd_start, help_text="Start the tracker for TASK.", task_arg=TaskArg.REQUIRED)
registry.register("stop", cmd_stop, help_text="Stop the currently running tracker.")
registry.register(
    "log",
    cmd_log,
    help_text="List accumulated time for TASK (default: all).",
    task_arg=TaskArg.OPTIONAL,
)
registry.register("status", cmd_status, help_text="Show the running task, if any.")
