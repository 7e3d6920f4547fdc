"""Flatten message payloads into plain text."""

from typing import Any

from claude_history.config import TOOL_COMMAND_CHARS


def _tool_placeholder(block: dict) -> str:
    name = block.get("name") or "unknown"
    tool_input = block.get("input")
    suffix = ""
    if isinstance(tool_input, dict):
        file_path = tool_input.get("file_path")
        command = tool_input.get("command")
        if isinstance(file_path, str):
            suffix = f" on {file_path}"
        elif isinstance(command, str):
            suffix = f": {command[:TOOL_COMMAND_CHARS]}"
    return f"[Tool: {name}{suffix}]"


def extract_content(payload: Any) -> str:
    """Return the text of a string or block-list payload.

    Text blocks contribute their text, ``tool_use`` blocks a
    ``[Tool: <name>...]`` placeholder. Other blocks (tool results, images,
    thinking) are dropped. Unknown payload shapes yield an empty string.
    """
    if isinstance(payload, str):
        return payload
    if not isinstance(payload, list):
        return ""

    parts: list[str] = []
    for block in payload:
        if isinstance(block, str):
            parts.append(block)
            continue
        if not isinstance(block, dict):
            continue
        text = block.get("text")
        if isinstance(text, str):
            parts.append(text)
        elif block.get("type") == "tool_use":
            parts.append(_tool_placeholder(block))
    return "\n".join(parts)


def message_content(message: Any) -> str:
    """Extract the ``content`` of a message-shaped dict."""
    if not isinstance(message, dict):
        return ""
    return extract_content(message.get("content"))
