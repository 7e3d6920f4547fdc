"""Parse Claude Code session files into Session models.

Two on-disk layouts are understood, tried in order:

* a single JSON object holding a ``messages`` (or ``conversation``) list,
  written by early CLI versions;
* JSON Lines, one record per line, each record carrying ``type``,
  ``sessionId``, ``cwd``, ``timestamp`` and a nested ``message``.

The first layout that yields at least one message wins.
"""

import hashlib
import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Protocol

from pydantic import TypeAdapter, ValidationError

from claude_history.config import CONVERSATION_TYPES
from claude_history.context.analysis import project_path_from_file
from claude_history.context.content import message_content
from claude_history.context.models import Message, Session

logger = logging.getLogger("claude_history.parser")

_DATETIME = TypeAdapter(datetime)


def parse_timestamp(value: Any) -> datetime | None:
    if not isinstance(value, str) or not value:
        return None
    try:
        parsed = _DATETIME.validate_python(value)
    except ValidationError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def file_mtime(path: Path) -> datetime | None:
    try:
        return datetime.fromtimestamp(path.stat().st_mtime, tz=timezone.utc)
    except OSError:
        return None


def path_hash_id(path: Path) -> str:
    """Stable 16-hex-digit identifier derived from a file path."""
    return hashlib.blake2b(str(path).encode("utf-8"), digest_size=8).hexdigest()


def session_id_from_path(path: Path) -> str:
    return path.stem or path_hash_id(path)


def _non_empty_str(value: Any) -> str | None:
    if isinstance(value, str) and value:
        return value
    return None


class SessionFormat(Protocol):
    """A transcript layout that can turn raw file bytes into a Session."""

    name: str

    def parse(self, raw: bytes, path: Path) -> Session | None: ...


class StructuredSessionFormat:
    """Whole-file JSON object with a list of messages."""

    name = "structured"

    def parse(self, raw: bytes, path: Path) -> Session | None:
        try:
            value = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, ValueError, RecursionError):
            return None
        if not isinstance(value, dict):
            return None
        items = value.get("messages")
        if items is None:
            items = value.get("conversation")
        if not isinstance(items, list):
            return None

        messages = []
        for item in items:
            if not isinstance(item, dict):
                continue
            content = message_content(item)
            if not content:
                continue
            role = item.get("role")
            messages.append(
                Message(
                    role=role if isinstance(role, str) else "unknown",
                    content=content,
                    timestamp=parse_timestamp(item.get("timestamp")),
                )
            )
        if not messages:
            return None

        stamps = [m.timestamp for m in messages if m.timestamp is not None]
        session_id = _non_empty_str(value.get("id")) or _non_empty_str(value.get("session_id"))
        return Session(
            id=session_id or session_id_from_path(path),
            project_path=project_path_from_file(path),
            cwd=_non_empty_str(value.get("cwd")),
            created_at=parse_timestamp(value.get("created_at")) or min(stamps, default=None),
            updated_at=parse_timestamp(value.get("updated_at")) or max(stamps, default=None) or file_mtime(path),
            messages=messages,
            file_path=path,
        )


class JsonLinesFormat:
    """One JSON record per line."""

    name = "jsonl"

    def _record_message(self, record: dict) -> Message | None:
        record_type = record.get("type")
        if isinstance(record_type, str) and record_type in CONVERSATION_TYPES:
            nested = record.get("message")
            role = nested.get("role") if isinstance(nested, dict) else None
            content = message_content(nested)
            if not isinstance(role, str) or not role:
                role = record_type
        elif record_type is None and isinstance(record.get("role"), str):
            # Legacy flat record: {"role": ..., "content": ...}
            role = record["role"]
            content = message_content(record)
        else:
            return None
        if not content:
            return None
        return Message(role=role, content=content, timestamp=parse_timestamp(record.get("timestamp")))

    def parse(self, raw: bytes, path: Path) -> Session | None:
        messages: list[Message] = []
        session_id: str | None = None
        cwd: str | None = None
        stamps: list[datetime] = []
        skipped = 0

        for line in raw.splitlines():
            if not line.strip():
                continue
            try:
                record = json.loads(line.decode("utf-8"))
            except (UnicodeDecodeError, ValueError, RecursionError):
                skipped += 1
                continue
            if not isinstance(record, dict):
                continue

            if session_id is None:
                session_id = _non_empty_str(record.get("sessionId"))
            if cwd is None:
                cwd = _non_empty_str(record.get("cwd"))
            stamp = parse_timestamp(record.get("timestamp"))
            if stamp is not None:
                stamps.append(stamp)

            message = self._record_message(record)
            if message is not None:
                messages.append(message)

        if skipped:
            logger.debug("Skipped %d malformed line(s) in %s", skipped, path)
        if not messages:
            return None

        return Session(
            id=session_id or session_id_from_path(path),
            project_path=project_path_from_file(path),
            cwd=cwd,
            created_at=min(stamps) if stamps else None,
            updated_at=max(stamps) if stamps else file_mtime(path),
            messages=messages,
            file_path=path,
        )


DEFAULT_FORMATS: tuple[SessionFormat, ...] = (StructuredSessionFormat(), JsonLinesFormat())


def parse_session_file(
    path: Path, formats: tuple[SessionFormat, ...] = DEFAULT_FORMATS
) -> Session | None:
    """Parse one session file.

    Returns ``None`` when no format finds a message in the file. Raises
    ``OSError`` when the file cannot be read.
    """
    raw = path.read_bytes()
    for fmt in formats:
        session = fmt.parse(raw, path)
        if session is not None:
            logger.debug("Parsed %s as %s (%d messages)", path, fmt.name, len(session.messages))
            return session
    return None
