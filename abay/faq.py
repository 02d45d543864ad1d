"""FAQ short-circuit: complexity heuristic and semantic topic matching."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .config import config
from .embeddings import similarity
from .exceptions import NotReadyError
from .persona import COMPLEX_TRIGGERS, PERSONA_NAME

if TYPE_CHECKING:
    from .embedding_index import EmbeddingIndex

logger = config.get_logger(__name__)

REPEATED_PUNCTUATION = re.compile(r"[?!]{2,}")


@dataclass(frozen=True)
class ComplexityRules:
    """Thresholds deciding when a question is too nuanced for a canned answer."""

    triggers: tuple[str, ...] = COMPLEX_TRIGGERS
    max_tokens: int = 9
    persona_name: str = PERSONA_NAME
    max_length_with_name: int = 35


def normalize_question(question: str) -> str:
    """Lowercase and trim a question."""
    return question.lower().strip()


def is_complex_question(
    question: str, rules: ComplexityRules | None = None
) -> bool:
    """Decide whether a question must skip the FAQ short-circuit.

    Any single rule disqualifies the question: a trigger substring, too many
    tokens, repeated ``?``/``!`` or a long question naming the persona.

    Returns:
        True if the question needs the full answer path.
    """
    rules = rules or ComplexityRules()
    q = normalize_question(question)

    return (
        any(trigger in q for trigger in rules.triggers)
        or len(q.split()) > rules.max_tokens
        or REPEATED_PUNCTUATION.search(q) is not None
        or (rules.persona_name in q and len(q) > rules.max_length_with_name)
    )


class FAQMatcher:
    """Matches simple questions against canonical FAQ phrases."""

    def __init__(
        self,
        index: EmbeddingIndex,
        threshold: float | None = None,
        rules: ComplexityRules | None = None,
    ) -> None:
        """Initialize the matcher.

        Args:
            index: Embedding index holding the FAQ topic embeddings.
            threshold: Minimum similarity for a match. If None, uses
                config.FAQ_MATCH_THRESHOLD.
            rules: Complexity heuristic settings.
        """
        self.index = index
        self.threshold = (
            config.FAQ_MATCH_THRESHOLD if threshold is None else threshold
        )
        self.rules = rules or ComplexityRules()

    def match(self, question: str) -> str | None:
        """Return the canned response of the best matching topic, if any.

        Ties keep the first topic and phrase encountered.

        Returns:
            The topic response, or None when nothing clears the threshold,
            the question is complex or embeddings are not ready.
        """
        q = normalize_question(question)
        if not q or is_complex_question(q, self.rules):
            return None

        try:
            topics = self.index.snapshot.faq_topics
            query_embedding = self.index.embed_query(q)
        except NotReadyError:
            logger.debug("FAQ matching skipped: embeddings not ready")
            return None

        best_score = 0.0
        best_topic = None
        for topic in topics:
            for embedding in topic.embeddings:
                score = similarity(query_embedding, embedding)
                if score > best_score:
                    best_score = score
                    best_topic = topic

        if best_topic is not None and best_score >= self.threshold:
            logger.info(
                "FAQ match -> %s (score: %.3f)", best_topic.topic_id, best_score
            )
            return best_topic.response

        return None
