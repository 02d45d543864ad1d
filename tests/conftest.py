"""Test configuration and fixtures for the Abay assistant tests.

This module provides reusable test fixtures organized by functionality:
- Constants and test data
- Mock embedding service and OpenAI API responses
- Embedding index fixtures
- Conversation store fixtures
- Pipeline and chat service factories
"""

import hashlib
from unittest.mock import Mock, create_autospec, patch

import numpy as np
import pytest

from abay import (
    AnswerPipeline,
    ChatBackend,
    ChatService,
    ConversationMemory,
    ConversationStore,
    EmbeddingIndex,
    EmbeddingService,
    FAQMatcher,
    KnowledgeRetriever,
    PromptComposer,
)
from abay.exceptions import NotReadyError
from abay.persona import KNOWLEDGE_CHUNKS


class TestConstants:
    """Centralized test constants to avoid repetition across test files."""

    TEST_API_KEY = "test-key"
    TEST_OPENAI_MODEL = "text-embedding-3-small"
    DEFAULT_EMBEDDING_DIMENSION = 384
    BACKEND_REPLY = "Знание — свет, незнание — тьма."
    DEATH_CHUNK = next(chunk for chunk in KNOWLEDGE_CHUNKS if "умер" in chunk)


class MockEmbeddingService:
    """Mock embedding service for testing without API calls.

    Generates deterministic embeddings based on text content hash, so distinct
    texts are nearly orthogonal and identical texts score 1.0. ``aliases``
    makes one text embed exactly like another; ``overrides`` pins a vector.
    """

    def __init__(
        self, dimension: int = TestConstants.DEFAULT_EMBEDDING_DIMENSION
    ) -> None:
        self.dimension = dimension
        self.aliases: dict[str, str] = {}
        self.overrides: dict[str, np.ndarray] = {}
        self.calls: list[str] = []
        self.fail = False

    def _hash_embedding(self, text: str) -> np.ndarray:
        seed = int.from_bytes(
            hashlib.sha256(text.lower().encode("utf-8")).digest()[:8],
            byteorder="big",
            signed=False,
        )
        rng = np.random.default_rng(seed)
        embedding = rng.normal(0, 1, self.dimension)
        return (embedding / np.linalg.norm(embedding)).astype(np.float32)

    def get_embedding(self, text: str) -> np.ndarray:
        """Generate deterministic mock embedding based on text hash."""
        self.calls.append(text)
        if self.fail:
            msg = "Embedding provider unavailable"
            raise NotReadyError(msg)
        key = text.lower()
        if key in self.overrides:
            return self.overrides[key]
        return self._hash_embedding(self.aliases.get(key, key))

    def get_embeddings_batch(self, texts: list[str]) -> list[np.ndarray]:
        """Generate batch of mock embeddings."""
        return [self.get_embedding(text) for text in texts]


def create_mock_openai_response(embeddings: list[list[float]]) -> Mock:
    """Create a mock OpenAI embeddings API response."""
    mock_response = Mock()
    mock_response.data = [Mock(embedding=emb) for emb in embeddings]
    return mock_response


def create_mock_chat_response(content: str | None) -> Mock:
    """Create a mock OpenAI chat completion response."""
    mock_response = Mock()
    mock_response.choices = [Mock(message=Mock(content=content))]
    return mock_response


def blend(target: np.ndarray, noise: np.ndarray, score: float) -> np.ndarray:
    """Build a unit vector whose similarity to ``target`` is ``score``.

    ``noise`` is orthogonalized against ``target`` first.
    """
    orthogonal = noise - np.dot(noise, target) * target
    orthogonal /= np.linalg.norm(orthogonal)
    vector = score * target + np.sqrt(1 - score**2) * orthogonal
    return vector.astype(np.float32)


@pytest.fixture
def openai_embeddings_api_mock():
    """Patch the OpenAI embeddings.create method."""
    with patch("openai.resources.embeddings.Embeddings.create") as mock_create:
        yield mock_create


@pytest.fixture
def openai_chat_api_mock():
    """Patch the OpenAI chat.completions.create method."""
    with patch(
        "openai.resources.chat.completions.Completions.create"
    ) as mock_create:
        yield mock_create


@pytest.fixture
def embedding_service():
    """EmbeddingService with a test API key."""
    return EmbeddingService(api_key=TestConstants.TEST_API_KEY)


@pytest.fixture
def mock_embedding_service():
    """Fresh MockEmbeddingService per test."""
    return MockEmbeddingService()


@pytest.fixture
def embedding_index_factory(mock_embedding_service):
    """Factory for EmbeddingIndex instances over the mock embedding service."""

    def _create_index(
        *, ready: bool = True, service=None, **kwargs
    ) -> EmbeddingIndex:
        index = EmbeddingIndex(service or mock_embedding_service, **kwargs)
        if ready:
            index.initialize()
        return index

    return _create_index


@pytest.fixture
def ready_index(embedding_index_factory):
    """Initialized index over the default persona configuration."""
    return embedding_index_factory()


@pytest.fixture
def unready_index(embedding_index_factory):
    """Index that has never been initialized."""
    return embedding_index_factory(ready=False)


@pytest.fixture
def conversation_store(tmp_path) -> ConversationStore:
    """Create temporary SQLite conversation store for testing."""
    return ConversationStore(tmp_path / "test_db.sqlite")


@pytest.fixture
def conversation_factory(conversation_store):
    """Factory creating a conversation prefilled with alternating turns."""

    def _create_conversation(turns: int = 0, user_id: str = "user-1") -> int:
        conversation = conversation_store.create_conversation(user_id)
        for i in range(turns):
            role = "user" if i % 2 == 0 else "assistant"
            conversation_store.add_turn(
                conversation.conversation_id, role, f"Turn {i}"
            )
        return conversation.conversation_id

    return _create_conversation


@pytest.fixture
def mock_backend():
    """Autospec ChatBackend returning a fixed reply."""
    backend = create_autospec(ChatBackend, instance=True)
    backend.generate.return_value = TestConstants.BACKEND_REPLY
    return backend


@pytest.fixture
def pipeline_factory(ready_index, conversation_store, mock_backend):
    """Factory for AnswerPipeline instances with mock collaborators."""

    def _create_pipeline(index=None, backend=None, memory=None) -> AnswerPipeline:
        index = index or ready_index
        return AnswerPipeline(
            faq_matcher=FAQMatcher(index),
            retriever=KnowledgeRetriever(index),
            composer=PromptComposer(),
            memory=memory or ConversationMemory(conversation_store),
            backend=backend or mock_backend,
        )

    return _create_pipeline


@pytest.fixture
def pipeline(pipeline_factory) -> AnswerPipeline:
    """Default pipeline over a ready index."""
    return pipeline_factory()


@pytest.fixture
def chat_service(conversation_store, pipeline) -> ChatService:
    """ChatService over the default pipeline and temporary store."""
    return ChatService(conversation_store, pipeline)


@pytest.fixture
def embeddings_response_factory():
    """Factory building mock OpenAI embeddings responses."""
    return create_mock_openai_response


@pytest.fixture
def chat_response_factory():
    """Factory building mock OpenAI chat completion responses."""
    return create_mock_chat_response


@pytest.fixture
def vector_blender():
    """Helper building vectors with a chosen similarity to a target."""
    return blend


@pytest.fixture
def death_chunk() -> str:
    """Knowledge passage about the death of Abay."""
    return TestConstants.DEATH_CHUNK


@pytest.fixture
def backend_reply() -> str:
    """Reply returned by the mock backend."""
    return TestConstants.BACKEND_REPLY
