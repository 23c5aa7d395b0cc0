"""SQLModel database models.

Only the tables the post-call summary job reads and writes.
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum
from uuid import uuid4

from sqlmodel import Field, SQLModel


class MeetingStatus(str, Enum):
    """Lifecycle of a meeting."""

    upcoming = "upcoming"
    active = "active"
    processing = "processing"
    completed = "completed"
    cancelled = "cancelled"


class User(SQLModel, table=True):
    """A human meeting participant."""

    __tablename__ = "users"

    id: str = Field(default_factory=lambda: str(uuid4()), primary_key=True)
    name: str = Field(max_length=200)
    email: str | None = Field(default=None, max_length=320)
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


class Agent(SQLModel, table=True):
    """An AI participant and its standing instructions."""

    __tablename__ = "agents"

    id: str = Field(default_factory=lambda: str(uuid4()), primary_key=True)
    name: str = Field(max_length=200)
    instructions: str = Field(default="")
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


class Meeting(SQLModel, table=True):
    """A single video call."""

    __tablename__ = "meetings"

    id: str = Field(default_factory=lambda: str(uuid4()), primary_key=True)
    name: str = Field(max_length=200)
    agent_id: str | None = Field(default=None, foreign_key="agents.id", index=True)
    status: MeetingStatus = Field(default=MeetingStatus.upcoming, index=True)
    transcript_url: str | None = Field(default=None)
    summary: str | None = Field(default=None)
    started_at: datetime | None = Field(default=None)
    ended_at: datetime | None = Field(default=None)
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
