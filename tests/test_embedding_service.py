"""Tests for EmbeddingService and similarity scoring."""

import os
from unittest.mock import patch

import numpy as np
import pytest
from openai import APIConnectionError, OpenAIError

from abay import EmbeddingService, similarity
from abay.config import config
from abay.embeddings import normalize
from abay.exceptions import NotReadyError


def test_init_with_api_key(embedding_service) -> None:
    assert embedding_service.model == config.EMBEDDING_MODEL
    assert embedding_service.client.api_key == "test-key"


def test_init_with_env_api_key() -> None:
    with patch.dict(os.environ, {"OPENAI_API_KEY": "env-key"}):
        service = EmbeddingService(model="text-embedding-3-large")
        assert service.model == "text-embedding-3-large"
        assert service.client.api_key == "env-key"


def test_get_embedding_is_normalized(
    openai_embeddings_api_mock, embedding_service, embeddings_response_factory
) -> None:
    openai_embeddings_api_mock.return_value = embeddings_response_factory(
        [[3.0, 4.0]]
    )

    result = embedding_service.get_embedding("кто такой абай")

    openai_embeddings_api_mock.assert_called_once_with(
        model=config.EMBEDDING_MODEL,
        input="кто такой абай",
    )
    assert isinstance(result, np.ndarray)
    np.testing.assert_allclose(result, [0.6, 0.8], rtol=1e-6)
    assert not result.flags.writeable


def test_get_embedding_api_error_signals_not_ready(
    openai_embeddings_api_mock, embedding_service
) -> None:
    openai_embeddings_api_mock.side_effect = OpenAIError("API Error")

    with pytest.raises(NotReadyError, match="Embedding provider unavailable"):
        embedding_service.get_embedding("test text")


def test_get_embedding_empty_data_signals_not_ready(
    openai_embeddings_api_mock, embedding_service, embeddings_response_factory
) -> None:
    openai_embeddings_api_mock.return_value = embeddings_response_factory([])

    with pytest.raises(NotReadyError, match="Malformed embedding response"):
        embedding_service.get_embedding("семья абая")


def test_get_embeddings_batch_short_response_signals_not_ready(
    openai_embeddings_api_mock, embedding_service, embeddings_response_factory
) -> None:
    openai_embeddings_api_mock.return_value = embeddings_response_factory(
        [[1.0, 0.0]]
    )

    with pytest.raises(NotReadyError, match="Malformed embedding response"):
        embedding_service.get_embeddings_batch(["text1", "text2"])


def test_get_embeddings_batch_with_batching(
    openai_embeddings_api_mock, embedding_service, embeddings_response_factory
) -> None:
    openai_embeddings_api_mock.side_effect = [
        embeddings_response_factory([[1.0, 0.0], [0.0, 2.0]]),
        embeddings_response_factory([[0.0, 0.0, 5.0]]),
    ]
    texts = ["text1", "text2", "text3"]

    results = embedding_service.get_embeddings_batch(texts, batch_size=2)

    assert openai_embeddings_api_mock.call_count == 2
    openai_embeddings_api_mock.assert_any_call(
        model=config.EMBEDDING_MODEL, input=["text1", "text2"]
    )
    openai_embeddings_api_mock.assert_any_call(
        model=config.EMBEDDING_MODEL, input=["text3"]
    )
    np.testing.assert_allclose(results[0], [1.0, 0.0])
    np.testing.assert_allclose(results[1], [0.0, 1.0])
    np.testing.assert_allclose(results[2], [0.0, 0.0, 1.0])


def test_get_embeddings_batch_empty_list(
    openai_embeddings_api_mock, embedding_service
) -> None:
    assert embedding_service.get_embeddings_batch([]) == []
    openai_embeddings_api_mock.assert_not_called()


def test_get_embeddings_batch_partial_failure(
    openai_embeddings_api_mock, embedding_service, embeddings_response_factory
) -> None:
    openai_embeddings_api_mock.side_effect = [
        embeddings_response_factory([[0.1, 0.2]]),
        OpenAIError("Second batch failed"),
    ]

    with pytest.raises(NotReadyError):
        embedding_service.get_embeddings_batch(["a", "b", "c"], batch_size=1)

    assert openai_embeddings_api_mock.call_count == 2


def test_normalize_zero_vector_stays_zero() -> None:
    result = normalize(np.zeros(3))
    np.testing.assert_array_equal(result, np.zeros(3))


def test_similarity_of_normalized_vectors() -> None:
    a = normalize(np.array([1.0, 1.0]))
    b = normalize(np.array([1.0, 0.0]))

    assert similarity(a, a) == pytest.approx(1.0)
    assert similarity(a, b) == pytest.approx(np.sqrt(0.5))
    assert similarity(a, b) == similarity(b, a)
    assert similarity(b, -b) == pytest.approx(-1.0)


@pytest.mark.skipif(
    not os.getenv("OPENAI_API_KEY"),
    reason="OPENAI_API_KEY environment variable not set",
)
def test_real_api_embeddings_are_normalized() -> None:
    service = EmbeddingService()

    try:
        first, second = service.get_embeddings_batch(
            ["кто такой абай", "биография абая"]
        )
    except NotReadyError as exc:  # pragma: no cover - network dependent
        if isinstance(exc.__cause__, APIConnectionError):
            pytest.skip(f"OpenAI not reachable: {exc.__cause__!s}")
        raise
    else:
        assert np.linalg.norm(first) == pytest.approx(1.0, abs=1e-3)
        assert -1.0 <= similarity(first, second) <= 1.0
