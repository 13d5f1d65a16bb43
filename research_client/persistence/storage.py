"""Durable slot for the session collection.

The slot holds a JSON list of session records with ISO-8601 timestamps.
Reads fail soft: an unreadable slot is treated as "no saved sessions" and a
malformed record is skipped without losing the rest.
Writes are best-effort: failures are logged and the in-memory state stays
authoritative.
"""

import json
import logging
import os
from collections.abc import Sequence
from pathlib import Path
from typing import Any, Protocol

from pydantic import ValidationError

from research_client.models.schemas import Session

logger = logging.getLogger(__name__)


class SessionStorage(Protocol):
    """Load/save contract consumed by the session store."""

    def load(self) -> list[Session]: ...

    def save(self, sessions: Sequence[Session]) -> None: ...


def dump_sessions(sessions: Sequence[Session]) -> list[dict[str, Any]]:
    """Flatten sessions to JSON-ready records.

    Pending placeholders are dropped and the pending flag is not written.
    """
    records: list[dict[str, Any]] = []
    for session in sessions:
        record = session.model_dump(mode="json")
        record["messages"] = [
            {key: value for key, value in message.items() if key != "is_pending"}
            for message in record["messages"]
            if not message["is_pending"]
        ]
        records.append(record)
    return records


def parse_sessions(raw: str | bytes) -> list[Session]:
    """Revive sessions from serialized JSON.

    Unknown fields are ignored and optional fields take their defaults.
    Records that fail validation are logged and skipped.

    Raises:
        ValueError: If the payload is not valid JSON or not a list.
    """
    records = json.loads(raw)
    if not isinstance(records, list):
        raise ValueError(f"Expected a list of sessions, got {type(records).__name__}")

    sessions: list[Session] = []
    for index, record in enumerate(records):
        try:
            sessions.append(Session.model_validate(record))
        except ValidationError as e:
            logger.warning(f"Skipping unreadable session record {index}: {e}")
    return sessions


class JsonFileStorage:
    """Session storage backed by a single JSON file.

    Attributes:
        path: Location of the durable slot.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def load(self) -> list[Session]:
        try:
            raw = self.path.read_bytes()
        except FileNotFoundError:
            return []
        except OSError as e:
            logger.error(f"Failed to load sessions from {self.path}: {e}")
            return []
        try:
            sessions = parse_sessions(raw)
        except ValueError as e:
            logger.error(f"Failed to load sessions from {self.path}: {e}")
            return []
        logger.info(f"Loaded {len(sessions)} session(s) from {self.path}")
        return sessions

    def save(self, sessions: Sequence[Session]) -> None:
        tmp_path = self.path.with_suffix(f"{self.path.suffix}.tmp")
        try:
            payload = json.dumps(dump_sessions(sessions), indent=2)
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as handle:
                handle.write(payload)
            os.replace(tmp_path, self.path)
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"Failed to save sessions to {self.path}: {e}")


class MemoryStorage:
    """In-process slot holding the serialized form.

    Used when no durable path is configured, and in tests. Goes through the
    same serialization as JsonFileStorage so round-trip behavior matches.
    """

    def __init__(self, payload: str | None = None) -> None:
        self.payload = payload
        self.save_count = 0

    def load(self) -> list[Session]:
        if self.payload is None:
            return []
        try:
            return parse_sessions(self.payload)
        except ValueError as e:
            logger.error(f"Failed to load sessions from memory slot: {e}")
            return []

    def save(self, sessions: Sequence[Session]) -> None:
        self.payload = json.dumps(dump_sessions(sessions))
        self.save_count += 1
