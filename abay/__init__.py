"""Abay - persona-driven conversational assistant with FAQ, RAG and memory."""

from .chat import ChatService
from .conversation import ConversationMemory, ConversationStore
from .embedding_index import EmbeddingIndex
from .embeddings import EmbeddingService, similarity
from .faq import ComplexityRules, FAQMatcher, is_complex_question
from .generation import ChatBackend
from .models import (
    Conversation,
    ConversationTurn,
    FAQTopic,
    KnowledgeBase,
    KnowledgeChunk,
    PipelineRequest,
)
from .pipeline import AnswerPipeline
from .prompts import PromptComposer
from .retriever import KnowledgeRetriever

__all__ = [
    "AnswerPipeline",
    "ChatBackend",
    "ChatService",
    "ComplexityRules",
    "Conversation",
    "ConversationMemory",
    "ConversationStore",
    "ConversationTurn",
    "EmbeddingIndex",
    "EmbeddingService",
    "FAQMatcher",
    "FAQTopic",
    "KnowledgeBase",
    "KnowledgeChunk",
    "KnowledgeRetriever",
    "PipelineRequest",
    "PromptComposer",
    "build_pipeline",
    "is_complex_question",
    "similarity",
]


def build_pipeline(
    embedding_index: EmbeddingIndex,
    store: ConversationStore,
    backend: ChatBackend | None = None,
) -> AnswerPipeline:
    """Wire an AnswerPipeline from its default components.

    Returns:
        A pipeline using configured thresholds and limits.
    """
    return AnswerPipeline(
        faq_matcher=FAQMatcher(embedding_index),
        retriever=KnowledgeRetriever(embedding_index),
        composer=PromptComposer(),
        memory=ConversationMemory(store),
        backend=backend or ChatBackend(),
    )
