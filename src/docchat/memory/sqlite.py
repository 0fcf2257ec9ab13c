"""SQLite conversation store.

Provides persistent conversation storage using SQLite database.
Uses aiosqlite for async access.
"""

import json
from datetime import datetime
from pathlib import Path

import aiosqlite
from loguru import logger

from .base import ConversationStore
from .models import SavedConversation


class SQLiteConversationStore(ConversationStore):
    """SQLite-backed conversation store.

    Messages and documents are stored as JSON columns on one row per
    conversation; ``id`` is the primary key, so an upsert can never
    produce a duplicate.
    """

    def __init__(self, path: str | Path = "./docchat.db"):
        self._db_path = Path(path)
        self._connection: aiosqlite.Connection | None = None

    async def connect(self) -> None:
        """Initialize database connection and schema."""
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._connection = await aiosqlite.connect(self._db_path)
        await self._create_schema()
        logger.debug("Conversation store opened at {}", self._db_path)

    async def _create_schema(self) -> None:
        """Create database tables."""
        await self._connection.execute("""
            CREATE TABLE IF NOT EXISTS conversations (
                id TEXT PRIMARY KEY,
                title TEXT NOT NULL,
                messages TEXT NOT NULL DEFAULT '[]',
                documents TEXT NOT NULL DEFAULT '[]',
                timestamp TEXT NOT NULL,
                seq INTEGER NOT NULL
            )
        """)

        await self._connection.execute("""
            CREATE INDEX IF NOT EXISTS idx_conversations_seq
            ON conversations(seq)
        """)

        await self._connection.commit()

    async def disconnect(self) -> None:
        """Close database connection."""
        if self._connection:
            await self._connection.close()
            self._connection = None

    def _require_connection(self) -> aiosqlite.Connection:
        if self._connection is None:
            raise RuntimeError("Conversation store is not connected; call connect() first")
        return self._connection

    @staticmethod
    def _row_to_conversation(row: tuple) -> SavedConversation:
        conversation_id, title, messages_json, documents_json, ts = row
        return SavedConversation(
            id=conversation_id,
            title=title,
            messages=json.loads(messages_json),
            documents=json.loads(documents_json),
            timestamp=datetime.fromisoformat(ts),
        )

    async def list_all(self) -> list[SavedConversation]:
        connection = self._require_connection()
        async with connection.execute(
            """
            SELECT id, title, messages, documents, timestamp
            FROM conversations
            ORDER BY seq DESC
            """
        ) as cursor:
            rows = await cursor.fetchall()
        return [self._row_to_conversation(row) for row in rows]

    async def get(self, conversation_id: str) -> SavedConversation | None:
        connection = self._require_connection()
        async with connection.execute(
            "SELECT id, title, messages, documents, timestamp FROM conversations WHERE id = ?",
            (conversation_id,)
        ) as cursor:
            row = await cursor.fetchone()
        if row is None:
            return None
        return self._row_to_conversation(row)

    async def upsert(self, conversation: SavedConversation) -> None:
        """Insert or replace, moving the record to the front of the list."""
        connection = self._require_connection()
        async with connection.execute(
            "SELECT COALESCE(MAX(seq), 0) + 1 FROM conversations"
        ) as cursor:
            row = await cursor.fetchone()
            seq = row[0]

        messages_json = json.dumps([m.model_dump(mode="json") for m in conversation.messages])
        documents_json = json.dumps([d.model_dump(mode="json") for d in conversation.documents])

        await connection.execute("""
            INSERT INTO conversations (id, title, messages, documents, timestamp, seq)
            VALUES (?, ?, ?, ?, ?, ?)
            ON CONFLICT(id) DO UPDATE SET
                title = excluded.title,
                messages = excluded.messages,
                documents = excluded.documents,
                timestamp = excluded.timestamp,
                seq = excluded.seq
        """, (
            conversation.id,
            conversation.title,
            messages_json,
            documents_json,
            conversation.timestamp.isoformat(),
            seq,
        ))
        await connection.commit()
        logger.debug("Saved conversation {}", conversation.id)

    async def delete(self, conversation_id: str) -> bool:
        connection = self._require_connection()
        cursor = await connection.execute(
            "DELETE FROM conversations WHERE id = ?",
            (conversation_id,)
        )
        await connection.commit()
        deleted = cursor.rowcount > 0
        await cursor.close()
        return deleted

    @property
    def backend_type(self) -> str:
        return "sqlite"

    @property
    def db_path(self) -> Path:
        return self._db_path
