"""Shared application state (injected into routes)."""
import logging
import time
from typing import Callable, Dict, Optional

from savedmsgs.config import DEFAULT_PAGE_SIZE, SESSION_MAX_IDLE_SEC
from savedmsgs.core.archive_fetcher import ArchiveFetcher, ArchiveTransport
from savedmsgs.core.media_resolver import MediaResolver
from savedmsgs.core.pagination import PaginationController
from savedmsgs.core.session import HistorySession
from savedmsgs.core.telegram_archive import TelegramArchive

logger = logging.getLogger(__name__)


class AppState:
    def __init__(
        self,
        archive: Optional[ArchiveTransport] = None,
        session_max_idle: float = SESSION_MAX_IDLE_SEC,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        # An injected archive is used as-is; the Telegram one is started by the app lifespan
        self.ready = archive is not None
        self.archive = archive if archive is not None else TelegramArchive()
        self.fetcher = ArchiveFetcher(self.archive)
        self.pagination = PaginationController(self.fetcher)
        self.media = MediaResolver(self.archive)
        self._sessions: Dict[str, HistorySession] = {}
        self._last_used: Dict[str, float] = {}
        self._session_max_idle = session_max_idle
        self._clock = clock

    def create_session(self, page_size: int = DEFAULT_PAGE_SIZE) -> HistorySession:
        self.evict_idle_sessions()
        session = HistorySession(page_size=page_size)
        self._sessions[session.id] = session
        self._last_used[session.id] = self._clock()
        return session

    def get_session(self, session_id: str) -> Optional[HistorySession]:
        self.evict_idle_sessions()
        session = self._sessions.get(session_id)
        if session is not None:
            self._last_used[session_id] = self._clock()
        return session

    def drop_session(self, session_id: str) -> bool:
        self._last_used.pop(session_id, None)
        return self._sessions.pop(session_id, None) is not None

    def evict_idle_sessions(self) -> int:
        """Drop sessions idle longer than the max age; a session mid-fetch is kept."""
        now = self._clock()
        idle = [
            sid
            for sid, last_used in self._last_used.items()
            if now - last_used > self._session_max_idle and not self._sessions[sid].busy
        ]
        for sid in idle:
            self.drop_session(sid)
        if idle:
            logger.info("Evicted %d idle sessions", len(idle))
        return len(idle)


_state: Optional[AppState] = None


def get_state() -> AppState:
    global _state
    if _state is None:
        _state = AppState()
    return _state
