"""Persistence of the session collection across restarts.

Responsibilities:
    - Serialize sessions (timestamps as ISO-8601 text)
    - Revive them on load, tolerating missing and unknown fields
    - Never raise to the caller: bad data loads as empty, failed writes are logged
"""

from research_client.persistence.storage import (
    JsonFileStorage,
    MemoryStorage,
    SessionStorage,
)

__all__ = ["JsonFileStorage", "MemoryStorage", "SessionStorage"]
