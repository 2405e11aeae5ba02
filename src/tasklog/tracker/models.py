# src/tasklog/tracker/models.py

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from .errors import InvalidTaskName


def normalize_task_name(raw: str) -> str:
    """Task names are compared and stored lowercased, without surrounding whitespace."""
    name = (raw or "").strip().lower()
    if not name:
        raise InvalidTaskName(raw)
    return name


def format_duration(seconds: int) -> str:
    """Whole seconds -> "<H>h <M>m <S>s"."""
    seconds = max(0, int(seconds))
    hours, rest = divmod(seconds, 3600)
    minutes, secs = divmod(rest, 60)
    return f"{hours}h {minutes}m {secs}s"


@dataclass(frozen=True, slots=True)
class Session:
    """One completed start-to-stop interval. Never modified after it is recorded."""

    started: datetime
    ended: datetime
    duration: str


@dataclass(slots=True)
class Subject:
    """A tracked task: its accumulated whole minutes and session history."""

    task: str
    duration_in_minutes: int = 0
    sessions: list[Session] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class ActiveSession:
    task: str
    started: datetime


@dataclass(slots=True)
class Document:
    current: ActiveSession | None = None
    subjects: list[Subject] = field(default_factory=list)

    def find(self, task: str) -> Subject | None:
        for subject in self.subjects:
            if subject.task == task:
                return subject
        return None


@dataclass(frozen=True, slots=True)
class TaskTotal:
    task: str
    minutes: int
