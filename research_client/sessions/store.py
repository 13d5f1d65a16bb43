"""Client-side session state.

SessionStore is the only writer of the session collection and the
current-session pointer. Sessions live in an arena keyed by id, and a
separate newest-first list of ids drives display order and eviction.

Invariants after every mutation:
    - at most ``capacity`` sessions are held
    - the current pointer names a held session or is empty
    - transcripts only grow, in arrival order
"""

import logging
import uuid
from collections.abc import Iterator

from research_client.errors.exceptions import DuplicateSessionError
from research_client.models.schemas import Message, Session, utcnow
from research_client.persistence.storage import SessionStorage

logger = logging.getLogger(__name__)

MAX_SESSIONS = 10


def _new_session_id() -> str:
    return f"session_{uuid.uuid4().hex}"


def default_session_name(session: Session) -> str:
    """Label a session from its creation time, in local time."""
    local = session.created_at.astimezone()
    return f"Chat - {local:%x} {local:%X}"


def session_timestamp_label(session: Session) -> str:
    """Short local creation time shown under a session name."""
    local = session.created_at.astimezone()
    return f"{local:%b %d, %H:%M}"


class SessionStore:
    """Bounded, persisted collection of chat sessions.

    Construct one per client and call ``initialize()`` once before use.

    Args:
        storage: Durable slot used for load and save.
        capacity: Maximum number of sessions kept. The oldest is evicted
            when a new one would exceed it.
    """

    def __init__(self, storage: SessionStorage, capacity: int = MAX_SESSIONS) -> None:
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self._storage = storage
        self._capacity = capacity
        self._sessions: dict[str, Session] = {}
        self._order: list[str] = []
        self._current_id: str | None = None
        self._initialized = False

    # Lifecycle

    def initialize(self) -> None:
        """Load persisted sessions, replacing the in-memory collection.

        Sessions saved without a name are labelled from their creation time.

        Only the first call loads; later calls are no-ops.
        """
        if self._initialized:
            return
        sessions: dict[str, Session] = {}
        for session in self._storage.load():
            if session.session_id in sessions:
                logger.warning(f"Skipping duplicate stored session {session.session_id}")
                continue
            if len(sessions) == self._capacity:
                logger.warning(f"Stored sessions exceed capacity {self._capacity}, truncating")
                break
            if not session.name.strip():
                session = session.model_copy(update={"name": default_session_name(session)})
            sessions[session.session_id] = session
        self._sessions = sessions
        self._order = list(sessions)
        self._current_id = None
        self._initialized = True
        logger.info(f"Session store initialized with {len(self._order)} session(s)")

    def shutdown(self) -> None:
        """Flush the collection to storage."""
        self._persist()
        self._initialized = False

    # Read accessors

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def sessions(self) -> list[Session]:
        """Sessions, newest first."""
        return [self._sessions[session_id] for session_id in self._order]

    @property
    def current_id(self) -> str | None:
        return self._current_id

    @property
    def current(self) -> Session | None:
        """The current session, always reflecting its latest transcript."""
        if self._current_id is None:
            return None
        return self._sessions.get(self._current_id)

    def get(self, session_id: str) -> Session | None:
        return self._sessions.get(session_id)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions

    def __len__(self) -> int:
        return len(self._order)

    def __iter__(self) -> Iterator[Session]:
        return iter(self.sessions)

    # Mutators

    def create_session(
        self,
        name: str | None = None,
        *,
        session_id: str | None = None,
        make_current: bool = False,
    ) -> Session:
        """Create a session and insert it at the front of the collection.

        Args:
            name: Display name. Blank or missing names are generated from the
                creation time.
            session_id: Identifier assigned by the backend. A local id is
                generated when omitted.
            make_current: Whether the new session becomes current.

        Returns:
            The new session.

        Raises:
            DuplicateSessionError: If ``session_id`` is already held.
        """
        if session_id is not None and session_id in self._sessions:
            raise DuplicateSessionError(session_id)

        session = Session(session_id=session_id or _new_session_id(), created_at=utcnow())
        label = name.strip() if name else ""
        session = session.model_copy(update={"name": label or default_session_name(session)})

        if len(self._order) >= self._capacity:
            self._evict_oldest()
        self._sessions[session.session_id] = session
        self._order.insert(0, session.session_id)
        if make_current:
            self._current_id = session.session_id

        logger.info(f"Created session {session.session_id} ({session.name})")
        self._persist()
        return session

    def set_current(self, session: Session | str | None) -> Session | None:
        """Point the current session at ``session``.

        Accepts a Session, a session id or None. An id that is not held
        clears the pointer.

        Returns:
            The current session after the change.
        """
        session_id = session.session_id if isinstance(session, Session) else session
        if session_id is not None and session_id not in self._sessions:
            logger.warning(f"Cannot select unknown session {session_id}, clearing selection")
            session_id = None
        self._current_id = session_id
        return self.current

    def append_message(self, session_id: str, message: Message) -> None:
        """Append ``message`` to the end of a session's transcript.

        Does nothing when the session is not held, since replies can arrive
        after their session was deleted. Callers that need to know must
        check membership first. Pending placeholders are never stored.
        """
        session = self._sessions.get(session_id)
        if session is None:
            logger.debug(f"Dropping message for unknown session {session_id}")
            return
        if message.is_pending:
            logger.debug(f"Not storing pending placeholder for session {session_id}")
            return
        self._sessions[session_id] = session.with_message(message)
        self._persist()

    def update_session(self, session: Session) -> Session:
        """Replace a held session with a new version of the same id.

        The replacement's transcript must extend the stored one.

        Raises:
            KeyError: If the session is not held.
            ValueError: If the replacement would drop or reorder messages.
        """
        existing = self._sessions.get(session.session_id)
        if existing is None:
            raise KeyError(session.session_id)
        if session.messages[: len(existing.messages)] != existing.messages:
            raise ValueError("Session transcripts are append-only")
        self._sessions[session.session_id] = session
        self._persist()
        return session

    def rename_session(self, session_id: str, name: str) -> Session:
        """Change a session's display name.

        Raises:
            KeyError: If the session is not held.
            ValueError: If ``name`` is blank.
        """
        if not name.strip():
            raise ValueError("Session name must not be blank")
        session = self._sessions.get(session_id)
        if session is None:
            raise KeyError(session_id)
        return self.update_session(session.model_copy(update={"name": name.strip()}))

    def delete_session(self, session_id: str) -> None:
        """Remove a session. Deleting an unknown id is a no-op."""
        if self._remove(session_id):
            logger.info(f"Deleted session {session_id}")
            self._persist()

    def delete_oldest_session(self) -> None:
        """Remove the oldest session, if any."""
        if self._order:
            self._evict_oldest()
            self._persist()

    # Internals

    def _evict_oldest(self) -> None:
        oldest = self._order[-1]
        self._remove(oldest)
        logger.info(f"Evicted oldest session {oldest}")

    def _remove(self, session_id: str) -> bool:
        if self._sessions.pop(session_id, None) is None:
            return False
        self._order.remove(session_id)
        if self._current_id == session_id:
            self._current_id = None
        return True

    def _persist(self) -> None:
        try:
            self._storage.save(self.sessions)
        except Exception:
            logger.exception("Failed to persist sessions, keeping in-memory state")
