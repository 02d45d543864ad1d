"""Similarity-ranked retrieval over the knowledge corpus."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .config import config
from .embeddings import similarity
from .exceptions import NotReadyError
from .faq import normalize_question

if TYPE_CHECKING:
    from .embedding_index import EmbeddingIndex

logger = config.get_logger(__name__)


class KnowledgeRetriever:
    """Ranks knowledge passages by similarity to a question."""

    def __init__(
        self,
        index: EmbeddingIndex,
        top_k: int | None = None,
        min_score: float | None = None,
    ) -> None:
        """Initialize the retriever.

        Args:
            index: Embedding index holding the knowledge chunk embeddings.
            top_k: Default number of passages. If None, uses config.RAG_TOP_K.
            min_score: Default minimum similarity. If None, uses
                config.RAG_MIN_SCORE.
        """
        self.index = index
        self.top_k = config.RAG_TOP_K if top_k is None else top_k
        self.min_score = config.RAG_MIN_SCORE if min_score is None else min_score

    def score(self, question: str) -> list[tuple[str, float]]:
        """Score every passage, most similar first.

        Equal scores keep corpus order.

        Raises:
            NotReadyError: If embeddings are not ready.
        """
        chunks = self.index.snapshot.chunks
        query_embedding = self.index.embed_query(normalize_question(question))
        scored = [
            (chunk.text, similarity(query_embedding, chunk.embedding))
            for chunk in chunks
        ]
        return sorted(scored, key=lambda item: item[1], reverse=True)

    def retrieve(
        self,
        question: str,
        top_k: int | None = None,
        min_score: float | None = None,
    ) -> list[str]:
        """Return the most relevant passages for a question.

        Returns:
            Up to ``top_k`` passage texts scoring at least ``min_score``, most
            relevant first. Empty when embeddings are not ready.
        """
        top_k = self.top_k if top_k is None else top_k
        min_score = self.min_score if min_score is None else min_score

        try:
            ranked = self.score(question)
        except NotReadyError:
            logger.debug("Retrieval skipped: embeddings not ready")
            return []

        return [text for text, score in ranked[:top_k] if score >= min_score]
