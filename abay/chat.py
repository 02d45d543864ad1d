"""Chat service recording turns around the answer pipeline."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .config import config
from .exceptions import ConversationNotFoundError
from .models import ASSISTANT_ROLE, USER_ROLE
from .persona import DEFAULT_CONVERSATION_TITLE

if TYPE_CHECKING:
    from .conversation import ConversationStore
    from .models import Conversation
    from .pipeline import AnswerPipeline

logger = config.get_logger(__name__)


class ChatService:
    """Stores the user turn, runs the pipeline, then stores the reply."""

    def __init__(self, store: ConversationStore, pipeline: AnswerPipeline) -> None:
        """Initialize the service.

        Args:
            store: Conversation store for turns and conversations.
            pipeline: Answer pipeline producing replies.
        """
        self.store = store
        self.pipeline = pipeline

    def start_session(self, user_id: str) -> Conversation:
        """Register the user and open their most recent conversation."""
        self.store.ensure_user(user_id)
        return self.store.open_conversation(user_id)

    def send_message(self, conversation_id: int, text: str, language: str) -> str:
        """Answer a user message and persist both sides of the exchange.

        The user turn is durable before the pipeline runs; the reply is stored
        after it returns.

        Returns:
            The reply text, or an empty string for a blank message.

        Raises:
            ConversationNotFoundError: If the conversation does not exist.
        """
        question = text.strip()
        if not question:
            return ""

        if self.store.get_conversation(conversation_id) is None:
            msg = f"Conversation {conversation_id} not found"
            raise ConversationNotFoundError(msg)

        self.store.add_turn(conversation_id, USER_ROLE, question)
        reply = self.pipeline.answer(question, conversation_id, language)
        self.store.add_turn(conversation_id, ASSISTANT_ROLE, reply)
        logger.debug("Stored exchange in conversation %s", conversation_id)
        return reply

    def new_conversation(
        self, user_id: str, title: str = DEFAULT_CONVERSATION_TITLE
    ) -> Conversation:
        """Create a conversation for the user."""
        return self.store.create_conversation(user_id, title)

    def list_conversations(self, user_id: str) -> list[Conversation]:
        """List the user's conversations, most recent first."""
        return self.store.list_conversations(user_id)

    def rename_conversation(self, conversation_id: int, title: str) -> None:
        """Rename a conversation."""
        self.store.rename_conversation(conversation_id, title)

    def delete_conversation(self, user_id: str, conversation_id: int) -> Conversation:
        """Delete a conversation.

        Returns:
            The conversation the user should continue in.
        """
        self.store.delete_conversation(user_id, conversation_id)
        return self.store.open_conversation(user_id)
