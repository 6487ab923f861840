"""Storage interface and stored records."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional


@dataclass
class Session:
    """A conversation session."""

    id: str
    tenant_id: str
    identifier: str
    parent_session_id: Optional[str] = None
    metadata: dict[str, Any] = field(default_factory=dict)
    compaction_count: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass
class MessageUsage:
    """Provider-agnostic token usage for a stored message."""

    input_tokens: int = 0
    output_tokens: int = 0
    cache_creation_tokens: int = 0
    cache_read_tokens: int = 0

    def total_tokens(self) -> int:
        """Sum of input and output tokens."""
        return self.input_tokens + self.output_tokens


@dataclass
class StoredMessage:
    """A message as kept in storage; content is stored as JSON."""

    id: str
    session_id: str
    role: str
    content: Any = None
    usage: Optional[MessageUsage] = None
    metadata: dict[str, Any] = field(default_factory=dict)
    is_preserved: bool = False
    is_summary: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass
class CompactionEvent:
    """A record of one context compaction."""

    id: str
    session_id: str
    strategy: str
    original_tokens: int = 0
    compacted_tokens: int = 0
    messages_removed: int = 0
    summary_content: str = ""
    preserved_message_ids: list[str] = field(default_factory=list)
    model_used: str = ""
    duration_ms: int = 0
    created_at: Optional[datetime] = None


class Store(ABC):
    """Persistence for sessions, messages and compaction history."""

    @abstractmethod
    def create_session(
        self,
        tenant_id: str,
        identifier: str,
        parent_session_id: Optional[str],
        metadata: dict[str, Any],
    ) -> str:
        """Create a session and return its id."""

    @abstractmethod
    def get_session(self, session_id: str) -> Session:
        """Return a session by id."""

    @abstractmethod
    def get_sessions_by_tenant(self, tenant_id: str) -> list[Session]:
        """Return all sessions of a tenant."""

    @abstractmethod
    def get_session_by_tenant_and_identifier(self, tenant_id: str, identifier: str) -> Session:
        """Return the session with this tenant and identifier."""

    @abstractmethod
    def get_session_token_count(self, session_id: str) -> int:
        """Return total tokens, summed from message usage."""

    @abstractmethod
    def update_session_compaction_count(self, session_id: str) -> None:
        """Increment the compaction counter of a session."""

    @abstractmethod
    def save_message(self, msg: StoredMessage) -> None:
        """Store one message."""

    @abstractmethod
    def save_messages(self, messages: list[StoredMessage]) -> None:
        """Store several messages."""

    @abstractmethod
    def get_messages(self, session_id: str) -> list[StoredMessage]:
        """Return all messages of a session in order."""

    @abstractmethod
    def get_messages_since(self, session_id: str, since: datetime) -> list[StoredMessage]:
        """Return messages created after a point in time."""

    @abstractmethod
    def delete_messages(self, message_ids: list[str]) -> None:
        """Delete messages by id."""

    @abstractmethod
    def save_compaction_event(self, event: CompactionEvent) -> None:
        """Record a compaction event."""

    @abstractmethod
    def get_compaction_history(self, session_id: str) -> list[CompactionEvent]:
        """Return the compaction events of a session."""

    @abstractmethod
    def archive_messages(self, compaction_event_id: str, messages: list[StoredMessage]) -> None:
        """Archive messages removed by a compaction."""