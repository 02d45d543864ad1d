"""One-time precomputation of FAQ and knowledge embeddings behind a readiness gate."""

from __future__ import annotations

import dataclasses
import threading
from typing import TYPE_CHECKING

from .config import config
from .exceptions import NotReadyError
from .models import FAQTopic, KnowledgeBase, KnowledgeChunk
from .persona import FAQ_TOPICS, KNOWLEDGE_CHUNKS

if TYPE_CHECKING:
    from collections.abc import Sequence

    from .embeddings import EmbeddingService
    from .models import EmbeddingVector

logger = config.get_logger(__name__)


class EmbeddingIndex:
    """Owns the read-only embedding caches used by FAQ matching and retrieval.

    The snapshot is built once by :meth:`initialize` and never mutated
    afterwards, so any number of readers may use it without locking. Until it
    is published, :attr:`is_ready` is False and every accessor raises
    :class:`NotReadyError`.
    """

    def __init__(
        self,
        embedding_service: EmbeddingService,
        faq_topics: Sequence[FAQTopic] = FAQ_TOPICS,
        knowledge_chunks: Sequence[str] = KNOWLEDGE_CHUNKS,
    ) -> None:
        """Initialize the index without computing any embeddings.

        Args:
            embedding_service: Provider used for corpus and query embeddings.
            faq_topics: FAQ topic definitions (embeddings are filled in here).
            knowledge_chunks: Knowledge corpus passages.
        """
        self.embedding_service = embedding_service
        self.faq_topics = tuple(faq_topics)
        self.knowledge_chunks = tuple(knowledge_chunks)
        self._snapshot: KnowledgeBase | None = None
        self._ready = threading.Event()
        self._init_lock = threading.Lock()

    @property
    def is_ready(self) -> bool:
        """Whether the snapshot has been published."""
        return self._ready.is_set()

    @property
    def snapshot(self) -> KnowledgeBase:
        """The published knowledge base.

        Raises:
            NotReadyError: If initialization has not completed.
        """
        if not self._ready.is_set() or self._snapshot is None:
            msg = "Embeddings are not initialized yet"
            raise NotReadyError(msg)
        return self._snapshot

    def initialize(self) -> KnowledgeBase | None:
        """Compute every FAQ and knowledge embedding exactly once.

        Returns:
            The published snapshot, or None when the provider failed.
        """
        with self._init_lock:
            if self._snapshot is not None:
                return self._snapshot

            logger.info(
                "Generating embeddings for %d FAQ topics and %d knowledge chunks",
                len(self.faq_topics),
                len(self.knowledge_chunks),
            )
            phrases = [
                phrase.lower()
                for topic in self.faq_topics
                for phrase in topic.canonical
            ]
            passages = [chunk.lower() for chunk in self.knowledge_chunks]

            try:
                vectors = self.embedding_service.get_embeddings_batch(
                    phrases + passages
                )
            except NotReadyError:
                logger.exception("Failed to initialize embeddings")
                return None

            if len(vectors) != len(phrases) + len(passages):
                logger.error(
                    "Embedding provider returned %d vectors for %d texts",
                    len(vectors),
                    len(phrases) + len(passages),
                )
                return None

            faq_vectors = iter(vectors[: len(phrases)])
            topics = tuple(
                dataclasses.replace(
                    topic,
                    embeddings=tuple(next(faq_vectors) for _ in topic.canonical),
                )
                for topic in self.faq_topics
            )
            chunks = tuple(
                KnowledgeChunk(text=text, embedding=embedding)
                for text, embedding in zip(
                    self.knowledge_chunks, vectors[len(phrases) :], strict=True
                )
            )

            self._snapshot = KnowledgeBase(faq_topics=topics, chunks=chunks)
            self._ready.set()
            logger.info("All embeddings ready, retrieval is active")
            return self._snapshot

    def start_background(self) -> threading.Thread:
        """Run :meth:`initialize` on a daemon thread.

        Returns:
            The started thread.
        """
        thread = threading.Thread(
            target=self.initialize,
            name="embedding-index-init",
            daemon=True,
        )
        thread.start()
        return thread

    def embed_query(self, text: str) -> EmbeddingVector:
        """Embed a query against the same provider as the corpus.

        Raises:
            NotReadyError: If the index is not ready or the provider fails.
        """
        if not self._ready.is_set():
            msg = "Embeddings are not initialized yet"
            raise NotReadyError(msg)
        return self.embedding_service.get_embedding(text)
