"""
Tracker core.

Components:
- models.py: typed document (Document, Subject, Session, ActiveSession)
- errors.py: error taxonomy (recoverable vs fatal)
- store.py: JSON file store with a fail-fast schema codec
- engine.py: task/session state machine on top of the store
"""

from .engine import TrackerEngine
from .errors import (
    CorruptData,
    InvalidTaskName,
    NoActiveSession,
    SessionAlreadyActive,
    StorageError,
    TaskAlreadyExists,
    TaskIsActive,
    TaskNotFound,
    TrackerError,
)
from .models import ActiveSession, Document, Session, Subject, TaskTotal
from .store import JsonStore

__all__ = [
    "ActiveSession",
    "CorruptData",
    "Document",
    "InvalidTaskName",
    "JsonStore",
    "NoActiveSession",
    "Session",
    "SessionAlreadyActive",
    "StorageError",
    "Subject",
    "TaskAlreadyExists",
    "TaskIsActive",
    "TaskNotFound",
    "TaskTotal",
    "TrackerEngine",
    "TrackerError",
]
