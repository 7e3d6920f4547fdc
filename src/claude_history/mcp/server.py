"""MCP server exposing Claude Code session history as tools."""

from mcp.server.fastmcp import FastMCP
from mcp.server.fastmcp.exceptions import ToolError

from claude_history import config
from claude_history.context.store import SessionStore
from claude_history.errors import ClaudeHistoryError

mcp = FastMCP(config.MCP_SERVER_NAME)
store: SessionStore | None = None


def _get_store() -> SessionStore:
    global store
    if store is None:
        try:
            store = SessionStore(root=config.CLAUDE_DIR)
        except ClaudeHistoryError as exc:
            raise ToolError(f"Failed to initialize session store: {exc}") from exc
    return store


@mcp.tool()
def list_sessions(limit: int = config.DEFAULT_LIST_LIMIT) -> list[dict]:
    """List recent Claude Code CLI sessions.

    Returns session IDs, project paths, timestamps, and a preview of the
    first request, most recently updated first.

    Args:
        limit: Maximum number of sessions to return (default 20, max 100)
    """
    try:
        sessions = _get_store().list_sessions(limit=limit)
    except ClaudeHistoryError as exc:
        raise ToolError(f"Failed to list sessions: {exc}") from exc
    return [s.model_dump() for s in sessions]


@mcp.tool()
def search_sessions(query: str, limit: int = config.DEFAULT_SEARCH_LIMIT) -> list[dict]:
    """Search Claude Code CLI sessions by keyword.

    Fuzzy-matches the query against the text of every message and returns
    the best matching sessions first.

    Args:
        query: Search query to find in session content
        limit: Maximum number of results (default 10, max 50)
    """
    try:
        sessions = _get_store().search_sessions(query=query, limit=limit)
    except ClaudeHistoryError as exc:
        raise ToolError(f"Failed to search sessions: {exc}") from exc
    return [s.model_dump() for s in sessions]


@mcp.tool()
def get_session(session_id: str) -> dict | str:
    """Get the full content of a Claude Code session by ID.

    Use this after finding a relevant session via search_sessions or
    list_sessions to read every message in it.

    Args:
        session_id: The session ID to retrieve
    """
    try:
        session = _get_store().get_session(session_id)
    except ClaudeHistoryError as exc:
        raise ToolError(f"Failed to get session: {exc}") from exc
    if not session:
        return f"Session {session_id} not found"
    return {
        "id": session.id,
        "project_path": session.project_path,
        "cwd": session.cwd,
        "created_at": session.created_at.isoformat() if session.created_at else None,
        "updated_at": session.updated_at.isoformat() if session.updated_at else None,
        "messages": [m.model_dump(mode="json") for m in session.messages],
    }


@mcp.tool()
def get_session_context(session_id: str) -> dict | str:
    """Get a condensed context summary of a Claude Code session.

    Returns the initial request, files mentioned, and key terms, which is
    usually enough to understand what was worked on without the full
    message history.

    Args:
        session_id: The session ID to get context for
    """
    try:
        context = _get_store().get_session_context(session_id)
    except ClaudeHistoryError as exc:
        raise ToolError(f"Failed to get session context: {exc}") from exc
    if not context:
        return f"Session {session_id} not found"
    return context.model_dump()
