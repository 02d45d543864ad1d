"""OpenAI embeddings service and similarity scoring."""

import numpy as np
from openai import OpenAI, OpenAIError

from .config import config
from .exceptions import NotReadyError
from .models import EmbeddingVector

logger = config.get_logger(__name__)


def normalize(vector: np.ndarray) -> EmbeddingVector:
    """Return a read-only, L2-normalized float32 copy of ``vector``."""
    embedding = np.asarray(vector, dtype=np.float32)
    norm = np.linalg.norm(embedding)
    if norm > 0:
        embedding = embedding / norm
    else:
        embedding = embedding.copy()
    embedding.setflags(write=False)
    return embedding


def similarity(a: EmbeddingVector, b: EmbeddingVector) -> float:
    """Cosine similarity of two normalized vectors.

    Returns:
        The dot product of the vectors, in [-1, 1].
    """
    return float(np.dot(a, b))


class EmbeddingService:
    """Handles OpenAI embeddings generation."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
    ) -> None:
        """Initialize the EmbeddingService with OpenAI API key and model.

        Args:
            api_key: OpenAI API key. If None,
                reads from OPENAI_API_KEY environment variable.
            model: Embedding model name. If None, uses config.EMBEDDING_MODEL.
        """
        api_key = api_key or config.get_openai_api_key()
        default_headers = config.get_api_headers()
        self.client = OpenAI(
            api_key=api_key,
            base_url=config.OPENAI_BASE_URL,
            default_headers=default_headers or None,
        )
        self.model = model or config.EMBEDDING_MODEL

    def get_embedding(self, text: str) -> EmbeddingVector:
        """Get a normalized embedding for a single text.

        Args:
            text: The input text to generate an embedding for.

        Returns:
            The L2-normalized embedding vector for the input text.

        Raises:
            NotReadyError: If the embeddings API is unavailable.
        """
        try:
            response = self.client.embeddings.create(
                model=self.model,
                input=text,
            )
        except OpenAIError as exc:
            logger.exception("Error generating embedding")
            msg = "Embedding provider unavailable"
            raise NotReadyError(msg) from exc
        if len(response.data or ()) != 1:
            logger.error("Embedding response carried no vector")
            msg = "Malformed embedding response"
            raise NotReadyError(msg)
        return normalize(np.array(response.data[0].embedding))

    def get_embeddings_batch(
        self,
        texts: list[str],
        batch_size: int = 100,
    ) -> list[EmbeddingVector]:
        """Get normalized embeddings for multiple texts in batches.

        Args:
            texts: List of input texts to generate embeddings for.
            batch_size: Number of texts to process in each batch.

        Returns:
            List of embedding vectors, in input order.

        Raises:
            NotReadyError: If the embeddings API is unavailable.
        """
        embeddings = []

        for i in range(0, len(texts), batch_size):
            batch_texts = texts[i : i + batch_size]
            try:
                response = self.client.embeddings.create(
                    model=self.model,
                    input=batch_texts,
                )
            except OpenAIError as exc:
                logger.exception("Error generating batch embeddings")
                msg = "Embedding provider unavailable"
                raise NotReadyError(msg) from exc
            if len(response.data or ()) != len(batch_texts):
                logger.error(
                    "Embedding batch returned %d vectors for %d texts",
                    len(response.data or ()),
                    len(batch_texts),
                )
                msg = "Malformed embedding response"
                raise NotReadyError(msg)
            embeddings.extend(
                normalize(np.array(data.embedding)) for data in response.data
            )
            logger.info("Generated embeddings for batch %d", i // batch_size + 1)

        return embeddings
