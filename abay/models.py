"""Data models for the answer pipeline."""

from dataclasses import dataclass, field

import numpy as np

EmbeddingVector = np.ndarray

USER_ROLE = "user"
ASSISTANT_ROLE = "assistant"


@dataclass(frozen=True)
class FAQTopic:
    """A canned answer together with the phrases that trigger it."""

    topic_id: str
    canonical: tuple[str, ...]
    response: str
    embeddings: tuple[EmbeddingVector, ...] = ()


@dataclass(frozen=True)
class KnowledgeChunk:
    """A short factual passage paired with its embedding."""

    text: str
    embedding: EmbeddingVector


@dataclass(frozen=True)
class KnowledgeBase:
    """Immutable snapshot of every precomputed embedding."""

    faq_topics: tuple[FAQTopic, ...]
    chunks: tuple[KnowledgeChunk, ...]


@dataclass(frozen=True)
class ConversationTurn:
    """Represents a single stored message of a conversation."""

    conversation_id: int
    role: str
    content: str
    timestamp: str

    def to_message(self) -> dict[str, str]:
        """Return the turn as a chat message mapping."""
        role = USER_ROLE if self.role == USER_ROLE else ASSISTANT_ROLE
        return {"role": role, "content": self.content}


@dataclass
class Conversation:
    """A titled conversation owned by a single user."""

    conversation_id: int
    user_id: str
    title: str
    created_at: str
    updated_at: str
    turns: list[ConversationTurn] = field(default_factory=list)


@dataclass(frozen=True)
class PipelineRequest:
    """A single question submitted to the answer pipeline."""

    question: str
    conversation_id: int
    language: str = "ru"
