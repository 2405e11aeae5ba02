# src/tasklog/tracker/engine.py

"""
Tracker engine: the task/session state machine.

Every public method is one full cycle against the store:
  load the document -> validate -> mutate the loaded copy -> save it back.

Nothing is cached between calls, so the file stays the single source of truth.
Validation failures raise before save(), leaving the file untouched.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Protocol

from .errors import (
    NoActiveSession,
    SessionAlreadyActive,
    TaskAlreadyExists,
    TaskIsActive,
    TaskNotFound,
)
from .models import (
    ActiveSession,
    Document,
    Session,
    Subject,
    TaskTotal,
    format_duration,
    normalize_task_name,
)

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


class DocumentStore(Protocol):
    def load(self) -> Document: ...
    def save(self, doc: Document) -> None: ...


def utc_now() -> datetime:
    return datetime.now(UTC)


class TrackerEngine:
    def __init__(self, store: DocumentStore, *, clock: Clock = utc_now) -> None:
        self._store = store
        self._clock = clock

    def _now(self) -> datetime:
        # Stored timestamps have whole-second precision; keep "now" consistent with that.
        return self._clock().astimezone(UTC).replace(microsecond=0)

    # ---- task lifecycle ----

    def add_task(self, name: str) -> Subject:
        task = normalize_task_name(name)
        doc = self._store.load()
        if doc.find(task) is not None:
            raise TaskAlreadyExists(task)

        subject = Subject(task=task)
        doc.subjects.append(subject)
        self._store.save(doc)
        logger.info("Task added name=%s", task)
        return subject

    def delete_task(self, name: str) -> Subject:
        """Remove a task together with its whole session history."""
        task = normalize_task_name(name)
        doc = self._store.load()
        if doc.current is not None and doc.current.task == task:
            raise TaskIsActive(task)

        subject = doc.find(task)
        if subject is None:
            raise TaskNotFound(task)

        doc.subjects.remove(subject)
        self._store.save(doc)
        logger.info("Task deleted name=%s sessions=%d", task, len(subject.sessions))
        return subject

    # ---- session lifecycle ----

    def start_task(self, name: str) -> ActiveSession:
        task = normalize_task_name(name)
        doc = self._store.load()
        if doc.find(task) is None:
            raise TaskNotFound(task)
        if doc.current is not None:
            raise SessionAlreadyActive(doc.current.task)

        doc.current = ActiveSession(task=task, started=self._now())
        self._store.save(doc)
        logger.info("Session started task=%s at=%s", task, doc.current.started.isoformat())
        return doc.current

    def stop_task(self) -> tuple[str, Session]:
        """
        Close the running session.

        Returns (task name, recorded Session). The elapsed whole minutes
        (floor) are added to the task's accumulated total.
        """
        doc = self._store.load()
        active = doc.current
        if active is None:
            raise NoActiveSession()

        subject = doc.find(active.task)
        if subject is None:
            logger.error(
                "Active session references unknown task=%s (removed outside the tracker?)",
                active.task,
            )
            raise TaskNotFound(active.task)

        ended = self._now()
        seconds = int((ended - active.started).total_seconds())
        if seconds < 0:
            logger.warning(
                "Clock moved backwards for task=%s started=%s ended=%s; recording zero-length session",
                active.task,
                active.started.isoformat(),
                ended.isoformat(),
            )
            seconds = 0

        session = Session(started=active.started, ended=ended, duration=format_duration(seconds))
        subject.sessions.append(session)
        subject.duration_in_minutes += seconds // 60
        doc.current = None

        self._store.save(doc)
        logger.info(
            "Session stopped task=%s seconds=%d total_minutes=%d",
            subject.task,
            seconds,
            subject.duration_in_minutes,
        )
        return subject.task, session

    # ---- read side ----

    def query(self, name: str | None = None) -> list[TaskTotal]:
        """
        name=None -> every task, most minutes first (ties keep registry order).
        name=...  -> just that task, or TaskNotFound.
        """
        doc = self._store.load()
        if name is None:
            ordered = sorted(doc.subjects, key=lambda s: s.duration_in_minutes, reverse=True)
            return [TaskTotal(task=s.task, minutes=s.duration_in_minutes) for s in ordered]
        return [self.total(name, doc=doc)]

    def total(self, name: str, *, doc: Document | None = None) -> TaskTotal:
        task = normalize_task_name(name)
        if doc is None:
            doc = self._store.load()
        subject = doc.find(task)
        if subject is None:
            raise TaskNotFound(task)
        return TaskTotal(task=subject.task, minutes=subject.duration_in_minutes)

    def current(self) -> ActiveSession | None:
        return self._store.load().current

    def now(self) -> datetime:
        return self._now()
