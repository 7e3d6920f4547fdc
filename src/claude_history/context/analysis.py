"""Text analytics over session messages: file paths, key terms, previews."""

import re
from collections import Counter
from collections.abc import Iterable
from pathlib import Path

from claude_history.config import MAX_FILES_MENTIONED, MAX_KEY_TERMS, STOP_WORDS
from claude_history.context.models import Message

# Leading/trailing characters that cannot belong to a path
_PATH_EDGE_RE = re.compile(r"^[^\w/\\.\-]+|[^\w/\\.\-]+$")


def _looks_like_path(token: str) -> bool:
    has_separator = "/" in token or "\\" in token
    return has_separator and ("." in token or token.endswith("/"))


def extract_file_paths(messages: Iterable[Message], limit: int = MAX_FILES_MENTIONED) -> list[str]:
    """Collect path-like tokens mentioned anywhere in the messages."""
    paths: set[str] = set()
    for message in messages:
        for token in message.content.split():
            if not _looks_like_path(token):
                continue
            cleaned = _PATH_EDGE_RE.sub("", token)
            if len(cleaned) > 3:
                paths.add(cleaned)
    return sorted(paths)[:limit]


def extract_key_terms(messages: Iterable[Message], limit: int = MAX_KEY_TERMS) -> list[str]:
    """Return the most frequent non-stop-word terms, most frequent first."""
    counts: Counter[str] = Counter()
    for message in messages:
        for token in message.content.split():
            term = "".join(ch for ch in token if ch.isalnum()).lower()
            if len(term) > 3 and term not in STOP_WORDS:
                counts[term] += 1
    return [term for term, _ in counts.most_common(limit)]


def truncate(text: str, max_chars: int) -> str:
    if len(text) > max_chars:
        return text[:max_chars] + "..."
    return text


def project_path_from_file(path: Path) -> str | None:
    """Decode the project directory a session file is stored under.

    Claude Code stores sessions in ``projects/<encoded-path>/`` where the
    encoded path replaces every ``/`` with ``-``, e.g.
    ``-home-user-myproject`` for ``/home/user/myproject``.
    """
    parts = path.parts
    # The project directory sits between "projects" and the file name
    for index in range(len(parts) - 3, -1, -1):
        if parts[index] == "projects":
            encoded = parts[index + 1]
            if encoded.startswith("-"):
                return encoded.replace("-", "/")
            return encoded
    return None
