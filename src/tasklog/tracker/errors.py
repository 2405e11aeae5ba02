# src/tasklog/tracker/errors.py

"""
Error taxonomy for the tracker core.

Recoverable errors describe a state conflict (unknown task, session already
running, ...). The operation aborts before anything is persisted and the CLI
reports the message.

Fatal errors (`fatal = True`) mean the store itself is unusable for this
invocation: the document does not parse, or the file cannot be read/written.
"""

from __future__ import annotations

from pathlib import Path


class TrackerError(Exception):
    """Base class for every error raised by the tracker core."""

    fatal = False


class InvalidTaskName(TrackerError, ValueError):
    def __init__(self, raw: str) -> None:
        super().__init__(f"Invalid task name: {raw!r}")
        self.raw = raw


class TaskAlreadyExists(TrackerError):
    def __init__(self, task: str) -> None:
        super().__init__(f"Task '{task}' already exists.")
        self.task = task


class TaskNotFound(TrackerError):
    def __init__(self, task: str) -> None:
        super().__init__(f"Task '{task}' not found.")
        self.task = task


class TaskIsActive(TrackerError):
    def __init__(self, task: str) -> None:
        super().__init__(f"Task '{task}' is currently running. Stop it first.")
        self.task = task


class SessionAlreadyActive(TrackerError):
    def __init__(self, task: str) -> None:
        super().__init__(f"A session is already running for task '{task}'.")
        self.task = task


class NoActiveSession(TrackerError):
    def __init__(self) -> None:
        super().__init__("No session is running.")


class CorruptData(TrackerError):
    """The persisted document is not valid JSON or does not match the schema."""

    fatal = True

    def __init__(self, path: str | Path, reason: str) -> None:
        super().__init__(f"Corrupt tracker data in {path}: {reason}")
        self.path = Path(path)
        self.reason = reason


class StorageError(TrackerError):
    """Filesystem failure while reading or writing the document."""

    fatal = True

    def __init__(self, path: str | Path, action: str) -> None:
        super().__init__(f"Failed to {action} tracker data at {path}")
        self.path = Path(path)
        self.action = action
