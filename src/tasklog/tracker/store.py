# src/tasklog/tracker/store.py

from __future__ import annotations

import json
import logging
import os
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from .errors import CorruptData, StorageError
from .models import ActiveSession, Document, Session, Subject

logger = logging.getLogger(__name__)


class _SchemaError(Exception):
    pass


def format_timestamp(ts: datetime) -> str:
    return ts.astimezone(UTC).isoformat(timespec="seconds")


def parse_timestamp(raw: Any) -> datetime:
    if not isinstance(raw, str) or not raw:
        raise _SchemaError(f"expected ISO-8601 timestamp, got {raw!r}")
    try:
        ts = datetime.fromisoformat(raw)
    except ValueError as exc:
        raise _SchemaError(f"unparseable timestamp {raw!r}") from exc
    if ts.tzinfo is None:
        raise _SchemaError(f"timestamp without UTC offset {raw!r}")
    return ts.astimezone(UTC)


def _require(obj: dict[str, Any], key: str, kind: type, where: str) -> Any:
    if key not in obj:
        raise _SchemaError(f"{where}: missing '{key}'")
    val = obj[key]
    # bool is an int subclass; never accept it for counters.
    if not isinstance(val, kind) or (kind is int and isinstance(val, bool)):
        raise _SchemaError(f"{where}: '{key}' must be {kind.__name__}")
    return val


def _check_task_name(task: str, where: str) -> str:
    # Engine lookups are always on the normalized name; anything else is unreachable.
    if not task:
        raise _SchemaError(f"{where}: empty task name")
    if task != task.strip().lower():
        raise _SchemaError(f"{where}: task name '{task}' is not normalized")
    return task


def _session_from_json(raw: Any, where: str) -> Session:
    if not isinstance(raw, dict):
        raise _SchemaError(f"{where}: session must be an object")
    return Session(
        started=parse_timestamp(_require(raw, "started", str, where)),
        ended=parse_timestamp(_require(raw, "ended", str, where)),
        duration=_require(raw, "duration", str, where),
    )


def _subject_from_json(raw: Any, index: int) -> Subject:
    where = f"subjects[{index}]"
    if not isinstance(raw, dict):
        raise _SchemaError(f"{where}: must be an object")
    task = _check_task_name(_require(raw, "task", str, where), where)
    minutes = _require(raw, "durationInMinutes", int, where)
    if minutes < 0:
        raise _SchemaError(f"{where}: negative durationInMinutes")
    sessions = _require(raw, "sessions", list, where)
    return Subject(
        task=task,
        duration_in_minutes=minutes,
        sessions=[
            _session_from_json(s, f"{where}.sessions[{i}]") for i, s in enumerate(sessions)
        ],
    )


def _current_from_json(raw: Any) -> ActiveSession | None:
    # Older files wrote an empty object (or an empty task) for "nothing running".
    if raw is None or raw == {}:
        return None
    if not isinstance(raw, dict):
        raise _SchemaError("current: must be an object or null")
    task = raw.get("task", "")
    if not isinstance(task, str):
        raise _SchemaError("current: 'task' must be str")
    if not task:
        return None
    _check_task_name(task, "current")
    session = _require(raw, "session", dict, "current")
    started = parse_timestamp(_require(session, "started", str, "current.session"))
    return ActiveSession(task=task, started=started)


def document_from_json(data: Any) -> Document:
    """Build a typed Document from decoded JSON. Raises _SchemaError on any mismatch."""
    if not isinstance(data, dict):
        raise _SchemaError("top level must be an object")
    subjects_raw = _require(data, "subjects", list, "document")
    subjects = [_subject_from_json(s, i) for i, s in enumerate(subjects_raw)]

    seen: set[str] = set()
    for subject in subjects:
        if subject.task in seen:
            raise _SchemaError(f"duplicate task '{subject.task}'")
        seen.add(subject.task)

    return Document(current=_current_from_json(data.get("current")), subjects=subjects)


def document_to_json(doc: Document) -> dict[str, Any]:
    current: dict[str, Any] | None = None
    if doc.current is not None:
        current = {
            "task": doc.current.task,
            "session": {"started": format_timestamp(doc.current.started)},
        }
    return {
        "current": current,
        "subjects": [
            {
                "task": s.task,
                "durationInMinutes": s.duration_in_minutes,
                "sessions": [
                    {
                        "started": format_timestamp(sess.started),
                        "ended": format_timestamp(sess.ended),
                        "duration": sess.duration,
                    }
                    for sess in s.sessions
                ],
            }
            for s in doc.subjects
        ],
    }


class JsonStore:
    """
    Single-file JSON store for the tracker document.

    - load() reads the whole file; a missing or empty file is a fresh Document
    - save() replaces the whole file via a temp file + os.replace

    No locking: one invocation at a time is assumed.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            logger.debug("Cannot create data dir %s: %s", self._path.parent, exc)
            raise StorageError(self._path.parent, "create directory for") from exc
        logger.debug("JsonStore ready path=%s", self._path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> Document:
        try:
            raw = self._path.read_text("utf-8")
        except FileNotFoundError:
            logger.debug("No tracker file at %s yet; starting empty.", self._path)
            return Document()
        except UnicodeDecodeError as exc:
            logger.debug("Tracker file %s is not UTF-8: %s", self._path, exc)
            raise CorruptData(self._path, "not UTF-8 text") from exc
        except OSError as exc:
            logger.debug("Failed to read %s: %s", self._path, exc)
            raise StorageError(self._path, "read") from exc

        if not raw.strip():
            return Document()

        try:
            doc = document_from_json(json.loads(raw))
        except json.JSONDecodeError as exc:
            logger.debug("Tracker file %s is not valid JSON: %s", self._path, exc)
            raise CorruptData(self._path, f"invalid JSON ({exc.msg} at line {exc.lineno})") from exc
        except _SchemaError as exc:
            logger.debug("Tracker file %s does not match schema: %s", self._path, exc)
            raise CorruptData(self._path, str(exc)) from exc

        logger.debug(
            "Loaded tracker document path=%s subjects=%d active=%s",
            self._path,
            len(doc.subjects),
            doc.current.task if doc.current else None,
        )
        return doc

    def save(self, doc: Document) -> None:
        text = json.dumps(document_to_json(doc), ensure_ascii=False, indent=2) + "\n"
        tmp = self._path.with_suffix(self._path.suffix + ".tmp")
        try:
            tmp.write_text(text, "utf-8")
            os.replace(tmp, self._path)
        except OSError as exc:
            logger.debug("Failed to write %s: %s", self._path, exc)
            try:
                tmp.unlink(missing_ok=True)
            except OSError:
                logger.debug("Could not remove temp file %s", tmp, exc_info=True)
            raise StorageError(self._path, "write") from exc
        logger.debug("Saved tracker document path=%s subjects=%d", self._path, len(doc.subjects))
