"""Session data models built from Claude Code transcripts."""

from datetime import datetime
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


class Message(BaseModel):
    """One conversational turn, flattened to plain text."""

    model_config = ConfigDict(frozen=True)

    role: str = Field(description="Author role (user, assistant, human, or a source type tag)")
    content: str = Field(description="Flattened message text")
    timestamp: datetime | None = None


class Session(BaseModel):
    """A parsed session transcript."""

    model_config = ConfigDict(frozen=True)

    id: str
    project_path: str | None = Field(default=None, description="Project decoded from the storage directory name")
    cwd: str | None = Field(default=None, description="Working directory recorded in the transcript")
    created_at: datetime | None = None
    updated_at: datetime | None = None
    messages: list[Message] = Field(min_length=1)
    file_path: Path


class SessionSummary(BaseModel):
    """Listing row for a session."""

    model_config = ConfigDict(frozen=True)

    id: str
    project_path: str | None = None
    cwd: str | None = None
    created_at: str | None = None
    updated_at: str | None = None
    message_count: int
    preview: str


class SessionContext(BaseModel):
    """Condensed view of what a session worked on."""

    model_config = ConfigDict(frozen=True)

    id: str
    cwd: str | None = None
    initial_request: str | None = None
    message_count: int
    files_mentioned: list[str] = Field(default_factory=list)
    key_terms: list[str] = Field(default_factory=list)
