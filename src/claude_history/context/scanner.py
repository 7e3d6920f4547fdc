"""Walk the storage root and parse every candidate session file."""

import enum
import logging
import os
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from pathlib import Path

from claude_history.config import MAX_SCAN_DEPTH, SESSION_SUFFIXES, SUBAGENT_PREFIX
from claude_history.context.models import Session
from claude_history.context.parser import parse_session_file

logger = logging.getLogger("claude_history.scanner")

SessionParser = Callable[[Path], Session | None]


class ScanStatus(enum.Enum):
    PARSED = "parsed"
    EMPTY = "empty"
    UNREADABLE = "unreadable"
    INVALID = "invalid"


@dataclass(frozen=True)
class ScanResult:
    """Outcome of handing one file to the parser."""

    path: Path
    status: ScanStatus
    session: Session | None = None
    error: Exception | None = None


def is_session_file(name: str) -> bool:
    return name.endswith(SESSION_SUFFIXES) and not name.startswith(SUBAGENT_PREFIX)


def iter_session_files(root: Path, max_depth: int = MAX_SCAN_DEPTH) -> Iterator[Path]:
    """Yield candidate session files under ``root``, at most ``max_depth`` levels deep."""
    for dirpath, dirnames, filenames in os.walk(root, followlinks=True):
        depth = len(Path(dirpath).relative_to(root).parts)
        if depth + 1 >= max_depth:
            dirnames[:] = []
        else:
            dirnames.sort()
        for name in sorted(filenames):
            if is_session_file(name):
                yield Path(dirpath) / name


def scan_file(path: Path, parser: SessionParser = parse_session_file) -> ScanResult:
    try:
        session = parser(path)
    except OSError as exc:
        return ScanResult(path=path, status=ScanStatus.UNREADABLE, error=exc)
    except Exception as exc:
        return ScanResult(path=path, status=ScanStatus.INVALID, error=exc)
    if session is None:
        return ScanResult(path=path, status=ScanStatus.EMPTY)
    return ScanResult(path=path, status=ScanStatus.PARSED, session=session)


def scan_sessions(root: Path, parser: SessionParser = parse_session_file) -> Iterator[ScanResult]:
    for path in iter_session_files(root):
        yield scan_file(path, parser)


def iter_sessions(root: Path, parser: SessionParser = parse_session_file) -> Iterator[Session]:
    """Yield every session found under ``root``, skipping files that fail."""
    for result in scan_sessions(root, parser):
        if result.status is ScanStatus.PARSED:
            yield result.session
        elif result.error is not None:
            logger.debug("Skipping %s %s: %r", result.status.value, result.path, result.error)
