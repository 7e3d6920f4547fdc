"""Filesystem-backed session store over Claude Code transcripts."""

import logging
from collections.abc import Iterator
from datetime import datetime, timezone
from pathlib import Path

from claude_history.config import (
    CLAUDE_DIR,
    DEFAULT_LIST_LIMIT,
    DEFAULT_SEARCH_LIMIT,
    HUMAN_ROLES,
    INITIAL_REQUEST_CHARS,
    MAX_LIST_LIMIT,
    MAX_SEARCH_LIMIT,
    NO_PREVIEW,
    PREVIEW_CHARS,
)
from claude_history.context.analysis import extract_file_paths, extract_key_terms, truncate
from claude_history.context.matching import Scorer, fuzzy_score
from claude_history.context.models import Session, SessionContext, SessionSummary
from claude_history.context.parser import parse_session_file
from claude_history.context.scanner import SessionParser, iter_sessions
from claude_history.errors import InvalidArgumentError, StorageRootMissingError

logger = logging.getLogger("claude_history.store")

_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


def _isoformat(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def _first_human_message(session: Session) -> str | None:
    for message in session.messages:
        if message.role in HUMAN_ROLES:
            return message.content
    return None


def _check_limit(limit: int) -> int:
    if limit < 0:
        raise InvalidArgumentError(f"limit must not be negative, got {limit}")
    return limit


def session_corpus(session: Session) -> str:
    return " ".join(message.content for message in session.messages)


def session_to_summary(session: Session) -> SessionSummary:
    first = _first_human_message(session)
    return SessionSummary(
        id=session.id,
        project_path=session.project_path,
        cwd=session.cwd,
        created_at=_isoformat(session.created_at),
        updated_at=_isoformat(session.updated_at),
        message_count=len(session.messages),
        preview=truncate(first, PREVIEW_CHARS) if first is not None else NO_PREVIEW,
    )


def session_to_context(session: Session) -> SessionContext:
    first = _first_human_message(session)
    return SessionContext(
        id=session.id,
        cwd=session.cwd,
        initial_request=truncate(first, INITIAL_REQUEST_CHARS) if first is not None else None,
        message_count=len(session.messages),
        files_mentioned=extract_file_paths(session.messages),
        key_terms=extract_key_terms(session.messages),
    )


class SessionStore:
    """Read-only view over the session files under a Claude Code directory.

    Nothing is cached: every call walks the directory again.
    """

    def __init__(
        self,
        root: Path | None = None,
        scorer: Scorer = fuzzy_score,
        parser: SessionParser = parse_session_file,
    ):
        self.root = root or CLAUDE_DIR
        if not self.root.is_dir():
            raise StorageRootMissingError(self.root)
        self.scorer = scorer
        self.parser = parser

    def _sessions(self) -> Iterator[Session]:
        return iter_sessions(self.root, self.parser)

    def list_sessions(self, limit: int = DEFAULT_LIST_LIMIT) -> list[SessionSummary]:
        """List sessions, most recently updated first."""
        limit = min(_check_limit(limit), MAX_LIST_LIMIT)
        sessions = sorted(
            self._sessions(),
            key=lambda s: (s.updated_at is not None, s.updated_at or _OLDEST),
            reverse=True,
        )
        return [session_to_summary(s) for s in sessions[:limit]]

    def search_sessions(self, query: str, limit: int = DEFAULT_SEARCH_LIMIT) -> list[SessionSummary]:
        """Fuzzy-search message content, best match first."""
        if not query:
            raise InvalidArgumentError("Query parameter is required")
        limit = min(_check_limit(limit), MAX_SEARCH_LIMIT)

        results: list[tuple[float, SessionSummary]] = []
        for session in self._sessions():
            score = self.scorer(session_corpus(session), query)
            if score is not None:
                results.append((score, session_to_summary(session)))

        results.sort(key=lambda pair: pair[0], reverse=True)
        logger.debug("Query %r matched %d session(s)", query, len(results))
        return [summary for _, summary in results[:limit]]

    def get_session(self, session_id: str) -> Session | None:
        """Get a session by ID."""
        if not session_id:
            raise InvalidArgumentError("session_id parameter is required")
        for session in self._sessions():
            if session.id == session_id:
                return session
        return None

    def get_session_context(self, session_id: str) -> SessionContext | None:
        """Summarize what a session worked on without its full history."""
        session = self.get_session(session_id)
        return session_to_context(session) if session else None
