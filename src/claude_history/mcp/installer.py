"""Register the MCP server in an MCP client's JSON configuration."""

import json
import shutil
from pathlib import Path

from claude_history.config import MCP_SERVER_NAME


def resolve_executable() -> str:
    """Resolve the full path to the claude-history executable."""
    path = shutil.which("claude-history")
    if path:
        return path
    for candidate in [
        Path.home() / ".local" / "bin" / "claude-history",
        Path("/usr/local/bin/claude-history"),
    ]:
        if candidate.exists():
            return str(candidate)
    return "claude-history"


def install_mcp_config(config_path: Path, executable: str | None = None) -> bool:
    """Read/merge/write the server entry into a JSON MCP config file."""
    config: dict = {}
    if config_path.exists():
        try:
            config = json.loads(config_path.read_text())
        except (json.JSONDecodeError, OSError):
            return False
        if not isinstance(config, dict):
            return False

    servers = config.setdefault("mcpServers", {})
    servers[MCP_SERVER_NAME] = {
        "command": executable or resolve_executable(),
        "args": ["mcp", "serve"],
    }

    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_text(json.dumps(config, indent=2) + "\n")
    return True


def remove_mcp_config(config_path: Path) -> bool:
    """Remove the server entry from a JSON MCP config file."""
    if not config_path.exists():
        return True
    try:
        config = json.loads(config_path.read_text())
    except (json.JSONDecodeError, OSError):
        return False
    servers = config.get("mcpServers", {}) if isinstance(config, dict) else {}
    if MCP_SERVER_NAME in servers:
        del servers[MCP_SERVER_NAME]
        config_path.write_text(json.dumps(config, indent=2) + "\n")
    return True
