"""SQLite conversation store and bounded conversation memory."""

from __future__ import annotations

import datetime
import sqlite3
from contextlib import closing, contextmanager
from pathlib import Path
from typing import TYPE_CHECKING

from .config import config
from .exceptions import (
    ConversationNotFoundError,
    LastConversationError,
    StorageReadError,
)
from .models import ASSISTANT_ROLE, USER_ROLE, Conversation, ConversationTurn
from .persona import DEFAULT_CONVERSATION_TITLE

if TYPE_CHECKING:
    from collections.abc import Iterator

logger = config.get_logger(__name__)


def _now() -> str:
    return datetime.datetime.now(tz=datetime.UTC).isoformat(timespec="microseconds")


class ConversationStore:
    """Persists users, conversations and their append-only turn logs."""

    def __init__(self, db_path: Path | None = None) -> None:
        """Initialize the store and ensure the schema exists.

        Args:
            db_path: Path to the SQLite database file. If None, uses
                config.DATABASE_PATH.
        """
        self.db_path = Path(db_path if db_path is not None else config.DATABASE_PATH)
        self.db_path.parent.mkdir(exist_ok=True, parents=True)
        self._create_tables()

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        with closing(sqlite3.connect(str(self.db_path))) as conn:
            conn.execute("PRAGMA foreign_keys = ON")
            with conn:
                yield conn

    def _create_tables(self) -> None:
        """Create users, conversations and messages tables if they don't exist."""
        with self._connect() as conn:
            cursor = conn.cursor()

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS users (
                    id TEXT PRIMARY KEY,
                    created_at TEXT NOT NULL
                )
            """)

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS conversations (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    user_id TEXT NOT NULL,
                    title TEXT NOT NULL,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL,
                    FOREIGN KEY (user_id) REFERENCES users (id)
                )
            """)

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS messages (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    conversation_id INTEGER NOT NULL,
                    role TEXT NOT NULL,
                    content TEXT NOT NULL,
                    timestamp TEXT NOT NULL,
                    FOREIGN KEY (conversation_id)
                        REFERENCES conversations (id) ON DELETE CASCADE
                )
            """)

            cursor.execute(
                "CREATE INDEX IF NOT EXISTS idx_user_conv ON conversations(user_id)"
            )
            cursor.execute(
                "CREATE INDEX IF NOT EXISTS idx_conv_msg ON messages(conversation_id)"
            )

    @staticmethod
    def _row_to_conversation(row: tuple) -> Conversation:
        conversation_id, user_id, title, created_at, updated_at = row
        return Conversation(
            conversation_id=conversation_id,
            user_id=user_id,
            title=title,
            created_at=created_at,
            updated_at=updated_at,
        )

    def ensure_user(self, user_id: str) -> None:
        """Register a user if not already known."""
        with self._connect() as conn:
            conn.execute(
                "INSERT OR IGNORE INTO users (id, created_at) VALUES (?, ?)",
                (user_id, _now()),
            )

    def create_conversation(
        self, user_id: str, title: str = DEFAULT_CONVERSATION_TITLE
    ) -> Conversation:
        """Create an empty conversation for a user.

        Returns:
            The new conversation.
        """
        title = title.strip() or DEFAULT_CONVERSATION_TITLE
        timestamp = _now()
        self.ensure_user(user_id)
        with self._connect() as conn:
            cursor = conn.execute(
                "INSERT INTO conversations (user_id, title, created_at, updated_at) "
                "VALUES (?, ?, ?, ?)",
                (user_id, title, timestamp, timestamp),
            )
            conversation_id = cursor.lastrowid

        logger.info("Created conversation %s for user %s", conversation_id, user_id)
        return Conversation(
            conversation_id=conversation_id,
            user_id=user_id,
            title=title,
            created_at=timestamp,
            updated_at=timestamp,
        )

    def get_conversation(self, conversation_id: int) -> Conversation | None:
        """Look up a conversation by id."""
        with self._connect() as conn:
            row = conn.execute(
                "SELECT id, user_id, title, created_at, updated_at "
                "FROM conversations WHERE id = ?",
                (conversation_id,),
            ).fetchone()
        return self._row_to_conversation(row) if row else None

    def list_conversations(self, user_id: str) -> list[Conversation]:
        """List a user's conversations, most recently updated first."""
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT id, user_id, title, created_at, updated_at "
                "FROM conversations WHERE user_id = ? "
                "ORDER BY updated_at DESC, id DESC",
                (user_id,),
            ).fetchall()
        return [self._row_to_conversation(row) for row in rows]

    def latest_conversation(self, user_id: str) -> Conversation | None:
        """Return the user's most recently updated conversation."""
        conversations = self.list_conversations(user_id)
        return conversations[0] if conversations else None

    def open_conversation(self, user_id: str) -> Conversation:
        """Return the latest conversation, creating one if the user has none."""
        return self.latest_conversation(user_id) or self.create_conversation(user_id)

    def rename_conversation(self, conversation_id: int, title: str) -> None:
        """Change a conversation title.

        Raises:
            ConversationNotFoundError: If the conversation does not exist.
        """
        with self._connect() as conn:
            cursor = conn.execute(
                "UPDATE conversations SET title = ? WHERE id = ?",
                (title.strip() or DEFAULT_CONVERSATION_TITLE, conversation_id),
            )
            if cursor.rowcount == 0:
                msg = f"Conversation {conversation_id} not found"
                raise ConversationNotFoundError(msg)

    def delete_conversation(self, user_id: str, conversation_id: int) -> None:
        """Delete a conversation and its turns.

        Raises:
            ConversationNotFoundError: If the user owns no such conversation.
            LastConversationError: If it is the user's only conversation.
        """
        with self._connect() as conn:
            owned = conn.execute(
                "SELECT 1 FROM conversations WHERE id = ? AND user_id = ?",
                (conversation_id, user_id),
            ).fetchone()
            if owned is None:
                msg = f"Conversation {conversation_id} not found"
                raise ConversationNotFoundError(msg)

            (count,) = conn.execute(
                "SELECT COUNT(*) FROM conversations WHERE user_id = ?", (user_id,)
            ).fetchone()
            if count <= 1:
                msg = "Cannot delete the only remaining conversation"
                raise LastConversationError(msg)

            conn.execute("DELETE FROM conversations WHERE id = ?", (conversation_id,))

        logger.info("Deleted conversation %s", conversation_id)

    def add_turn(
        self, conversation_id: int, role: str, content: str
    ) -> ConversationTurn:
        """Append a turn and refresh the conversation's updated timestamp.

        Raises:
            ConversationNotFoundError: If the conversation does not exist.
            ValueError: If the role is not user or assistant.
        """
        if role not in {USER_ROLE, ASSISTANT_ROLE}:
            msg = f"Unsupported role: {role}"
            raise ValueError(msg)

        timestamp = _now()
        with self._connect() as conn:
            cursor = conn.execute(
                "UPDATE conversations SET updated_at = ? WHERE id = ?",
                (timestamp, conversation_id),
            )
            if cursor.rowcount == 0:
                msg = f"Conversation {conversation_id} not found"
                raise ConversationNotFoundError(msg)
            conn.execute(
                "INSERT INTO messages (conversation_id, role, content, timestamp) "
                "VALUES (?, ?, ?, ?)",
                (conversation_id, role, content, timestamp),
            )

        return ConversationTurn(
            conversation_id=conversation_id,
            role=role,
            content=content,
            timestamp=timestamp,
        )

    def load_turns(self, conversation_id: int) -> list[ConversationTurn]:
        """Load the full turn log, oldest first."""
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT role, content, timestamp FROM messages "
                "WHERE conversation_id = ? ORDER BY timestamp ASC, id ASC",
                (conversation_id,),
            ).fetchall()
        return [
            ConversationTurn(conversation_id, role, content, timestamp)
            for role, content, timestamp in rows
        ]

    def load_recent_turns(
        self, conversation_id: int, limit: int
    ) -> list[ConversationTurn]:
        """Load the most recent ``limit`` turns, oldest first.

        Raises:
            StorageReadError: If the database cannot be read.
        """
        try:
            with self._connect() as conn:
                rows = conn.execute(
                    "SELECT role, content, timestamp FROM ("
                    "  SELECT id, role, content, timestamp FROM messages"
                    "  WHERE conversation_id = ?"
                    "  ORDER BY timestamp DESC, id DESC LIMIT ?"
                    ") ORDER BY timestamp ASC, id ASC",
                    (conversation_id, max(limit, 0)),
                ).fetchall()
        except sqlite3.Error as exc:
            msg = f"Failed to load turns of conversation {conversation_id}"
            raise StorageReadError(msg) from exc
        return [
            ConversationTurn(conversation_id, role, content, timestamp)
            for role, content, timestamp in rows
        ]


class ConversationMemory:
    """Read-only window over the most recent turns of a conversation."""

    def __init__(self, store: ConversationStore, limit: int | None = None) -> None:
        """Initialize the memory.

        Args:
            store: Conversation store to read from.
            limit: Default window size. If None, uses config.HISTORY_LIMIT.
        """
        self.store = store
        self.limit = config.HISTORY_LIMIT if limit is None else limit

    def load_history(
        self, conversation_id: int, limit: int | None = None
    ) -> list[dict[str, str]]:
        """Load prior turns as chat messages, oldest first.

        Returns:
            At most ``limit`` role/content mappings; empty if the read fails.
        """
        limit = self.limit if limit is None else limit
        try:
            turns = self.store.load_recent_turns(conversation_id, limit)
        except StorageReadError:
            logger.exception("Error loading history, continuing without it")
            return []
        return [turn.to_message() for turn in turns]
