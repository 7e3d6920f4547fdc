"""Configuration and static word lists for Claude History."""

import os
import sys
from pathlib import Path


def _env_path(name: str, default: Path) -> Path:
    value = os.getenv(name)
    if not value:
        return default
    return Path(value).expanduser()


# Session storage root written by the Claude Code CLI
CLAUDE_DIR = _env_path("CLAUDE_HISTORY_ROOT", Path.home() / ".claude")

LOG_LEVEL = os.getenv("CLAUDE_HISTORY_LOG_LEVEL", "WARNING").upper()

# Scanner
MAX_SCAN_DEPTH = 5
SESSION_SUFFIXES = (".jsonl", ".json")
# Sub-agent transcripts are derived from a parent session
SUBAGENT_PREFIX = "agent-"

# Result caps
DEFAULT_LIST_LIMIT = 20
MAX_LIST_LIMIT = 100
DEFAULT_SEARCH_LIMIT = 10
MAX_SEARCH_LIMIT = 50

# Projection sizes
PREVIEW_CHARS = 200
INITIAL_REQUEST_CHARS = 500
MAX_FILES_MENTIONED = 20
MAX_KEY_TERMS = 15
TOOL_COMMAND_CHARS = 50
NO_PREVIEW = "No preview available"

# Record types that carry conversation turns
CONVERSATION_TYPES = frozenset({"user", "assistant"})

# Roles that count as the human turn ("human" is the legacy name)
HUMAN_ROLES = frozenset({"user", "human"})

STOP_WORDS = frozenset(
    {
        "the", "a", "an", "is", "are", "was", "were", "be", "been", "being",
        "have", "has", "had", "do", "does", "did", "will", "would", "could",
        "should", "may", "might", "must", "shall", "can", "need", "dare",
        "ought", "used", "to", "of", "in", "for", "on", "with", "at", "by",
        "from", "as", "into", "through", "during", "before", "after", "above",
        "below", "between", "under", "again", "further", "then", "once", "here",
        "there", "when", "where", "why", "how", "all", "each", "few", "more",
        "most", "other", "some", "such", "no", "nor", "not", "only", "own",
        "same", "so", "than", "too", "very", "just", "and", "but", "if", "or",
        "because", "until", "while", "this", "that", "these", "those", "i", "you",
        "he", "she", "it", "we", "they", "what", "which", "who", "whom", "its",
        "his", "her", "their", "my", "your", "our",
        "also", "like", "let", "lets", "make", "sure", "want", "using",
        "about", "now", "get", "got", "one", "new", "well", "yes",
        # Transcript noise
        "tool", "tools", "file", "files", "path", "command", "result", "output",
        "line", "lines", "true", "false", "none", "null",
    }
)

# MCP client configuration (Claude Desktop)
MCP_SERVER_NAME = "claude-history"

if sys.platform == "darwin":
    CLAUDE_DESKTOP_CONFIG = (
        Path.home() / "Library" / "Application Support" / "Claude" / "claude_desktop_config.json"
    )
elif sys.platform == "win32":
    CLAUDE_DESKTOP_CONFIG = (
        _env_path("APPDATA", Path.home() / "AppData" / "Roaming") / "Claude" / "claude_desktop_config.json"
    )
else:
    CLAUDE_DESKTOP_CONFIG = Path.home() / ".config" / "Claude" / "claude_desktop_config.json"
