"""Conversation controller.

Owns the active SessionState and coordinates it with the completion
client and the stores: creating, loading, saving, renaming and deleting
conversations, and sending the session's single question.
"""

import time
from collections.abc import Callable

from loguru import logger

from ..completion import CompletionClient, CompletionOutcome
from ..memory import ConversationStore, SavedConversation
from ..memory.models import utcnow
from ..settings import API_KEY_SETTING, SettingsStore
from .state import NEW_CONVERSATION_ID, SessionState

TITLE_PREVIEW_CHARS = 30


def _millis() -> int:
    return int(time.time() * 1000)


class ConversationController:
    """Session lifecycle on top of the conversation and settings stores.

    All store writes go through this class, one at a time, from the same
    control flow that triggered them.
    """

    def __init__(
        self,
        store: ConversationStore,
        settings: SettingsStore,
        client: CompletionClient,
        clock: Callable[[], int] = _millis,
    ) -> None:
        self._store = store
        self._settings = settings
        self._client = client
        self._clock = clock
        self._state = SessionState()

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def client(self) -> CompletionClient:
        return self._client

    async def saved_conversations(self) -> list[SavedConversation]:
        return await self._store.list_all()

    async def get_api_key(self) -> str:
        return await self._settings.get(API_KEY_SETTING) or ""

    async def set_api_key(self, api_key: str) -> None:
        await self._settings.set(API_KEY_SETTING, api_key)

    async def _mint_id(self) -> str:
        candidate = self._clock()
        while await self._store.get(str(candidate)) is not None:
            candidate += 1
        return str(candidate)

    def _title_for_save(self) -> str:
        if self._state.title.strip():
            return self._state.title
        first = self._state.messages[0].content
        return first[:TITLE_PREVIEW_CHARS] + "..."

    async def save_session(self) -> SavedConversation | None:
        """Persist the active session.

        No-op while the transcript is empty. The first save mints an id
        which stays with the session from then on.
        """
        state = self._state
        if not state.messages:
            return None

        conversation_id = await self._mint_id() if state.is_new else state.conversation_id
        conversation = SavedConversation(
            id=conversation_id,
            title=self._title_for_save(),
            messages=list(state.messages),
            documents=state.documents.list(),
            timestamp=utcnow(),
        )
        await self._store.upsert(conversation)
        state.conversation_id = conversation_id
        logger.debug("Session saved as {}", conversation_id)
        return conversation

    def _reset(self) -> None:
        self._state = SessionState()

    async def create_session(self) -> SessionState:
        """Save the current session (if it has content) and start a fresh one."""
        await self.save_session()
        self._reset()
        return self._state

    async def load_session(self, conversation_id: str) -> SavedConversation | None:
        """Save the current session, then switch to a stored one.

        Unknown ids leave the active session untouched and return None.
        """
        await self.save_session()
        conversation = await self._store.get(conversation_id)
        if conversation is None:
            logger.info("No saved conversation with id {}", conversation_id)
            return None

        state = SessionState(
            conversation_id=conversation.id,
            title=conversation.title,
            messages=list(conversation.messages),
            message_sent=len(conversation.messages) > 0,
        )
        state.documents.replace(conversation.documents)
        self._state = state
        return conversation

    async def delete_session(self, conversation_id: str) -> bool:
        """Delete a stored conversation.

        Deleting the active conversation resets to a fresh session
        without saving it back first, so the deleted chat stays deleted.
        """
        deleted = await self._store.delete(conversation_id)
        if conversation_id != NEW_CONVERSATION_ID and self._state.conversation_id == conversation_id:
            self._reset()
        return deleted

    async def rename_session(self, title: str) -> SavedConversation | None:
        """Change the title; saved sessions are persisted right away."""
        self._state.title = title
        if self._state.is_new:
            return None
        return await self.save_session()

    async def send_message(self, prompt: str | None = None) -> CompletionOutcome:
        """Send the session's single question and persist the result.

        Uses the draft text when ``prompt`` is omitted. The session is
        saved after every outcome that reached the network.
        """
        text = self._state.draft if prompt is None else prompt
        api_key = await self.get_api_key()
        outcome = await self._client.send(self._state, text, api_key)
        if outcome.reached_network:
            await self.save_session()
        return outcome

