"""Shared fixtures: a throwaway Claude Code directory."""

import json

import pytest


@pytest.fixture
def claude_dir(tmp_path):
    root = tmp_path / ".claude"
    (root / "projects").mkdir(parents=True)
    return root


@pytest.fixture
def write_session(claude_dir):
    """Write a JSONL transcript under projects/<project>/<name>.jsonl."""

    def _write(name, records, project="-home-user-myproject"):
        path = claude_dir / "projects" / project / f"{name}.jsonl"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("".join(json.dumps(r) + "\n" for r in records))
        return path

    return _write
