"""Answer pipeline: FAQ short-circuit, retrieval, prompt, history, generation."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .config import config
from .exceptions import BackendError
from .models import USER_ROLE, PipelineRequest
from .persona import APOLOGIES, SUPPORTED_LANGUAGES

if TYPE_CHECKING:
    from .conversation import ConversationMemory
    from .faq import FAQMatcher
    from .generation import ChatBackend
    from .prompts import PromptComposer
    from .retriever import KnowledgeRetriever

logger = config.get_logger(__name__)


class AnswerPipeline:
    """Composes the persona's reply to one question.

    Stages run strictly in order: FAQ match, retrieval, prompt composition,
    history load, generation. A FAQ hit ends the request before any other
    stage runs. The pipeline never raises; backend failures become a fixed
    apology in the request language.
    """

    def __init__(  # noqa: PLR0913,PLR0917
        self,
        faq_matcher: FAQMatcher,
        retriever: KnowledgeRetriever,
        composer: PromptComposer,
        memory: ConversationMemory,
        backend: ChatBackend,
        timeout: float | None = None,
    ) -> None:
        """Initialize the pipeline with its collaborators.

        Args:
            faq_matcher: Canned-answer matcher.
            retriever: Knowledge retriever for context injection.
            composer: System prompt composer.
            memory: Conversation history reader.
            backend: Generative backend.
            timeout: Backend timeout in seconds. If None, uses
                config.CHAT_TIMEOUT_SECONDS.
        """
        self.faq_matcher = faq_matcher
        self.retriever = retriever
        self.composer = composer
        self.memory = memory
        self.backend = backend
        self.timeout = config.CHAT_TIMEOUT_SECONDS if timeout is None else timeout

    @staticmethod
    def resolve_language(language: str | None) -> str:
        """Map a language code to a supported one, defaulting otherwise."""
        code = (language or "").lower()
        if code in SUPPORTED_LANGUAGES:
            return code
        return config.DEFAULT_LANGUAGE

    @staticmethod
    def fallback_reply(language: str) -> str:
        """Apology returned when the backend fails."""
        return APOLOGIES.get(language, APOLOGIES["ru"])

    def build_messages(
        self, question: str, conversation_id: int
    ) -> list[dict[str, str]]:
        """Load bounded history and append the question as the newest turn.

        A trailing stored user turn equal to the question is the caller's
        write-ahead record of this same request and is not repeated. One
        extra turn is read so the window still holds ``limit`` prior turns
        after that record is dropped.
        """
        limit = max(self.memory.limit, 0)
        history = self.memory.load_history(conversation_id, limit=limit + 1)
        if history and history[-1] == {"role": USER_ROLE, "content": question}:
            history = history[:-1]
        history = history[-limit:] if limit else []
        history.append({"role": USER_ROLE, "content": question})
        return history

    def answer(self, question: str, conversation_id: int, language: str) -> str:
        """Answer a question within a conversation.

        Returns:
            The reply text; empty only for an empty question.
        """
        return self.run(
            PipelineRequest(
                question=question,
                conversation_id=conversation_id,
                language=self.resolve_language(language),
            )
        )

    def run(self, request: PipelineRequest) -> str:
        """Execute every stage for a single request."""
        q = request.question.strip()
        if not q:
            self._log_source(request, "empty")
            return ""

        faq_reply = self.faq_matcher.match(q)
        if faq_reply:
            self._log_source(request, "faq")
            return faq_reply

        chunks = self.retriever.retrieve(q)
        if chunks:
            logger.info("RAG: passing %d chunks into the context", len(chunks))

        system_prompt = self.composer.compose(q, request.language, chunks)
        messages = self.build_messages(q, request.conversation_id)

        try:
            reply = self.backend.generate(
                system_prompt, messages, timeout=self.timeout
            )
        except BackendError:
            logger.exception(
                "Backend failed for conversation %s", request.conversation_id
            )
            self._log_source(request, "fallback")
            return self.fallback_reply(request.language)

        self._log_source(request, "generated")
        return reply.strip()

    @staticmethod
    def _log_source(request: PipelineRequest, source: str) -> None:
        logger.info(
            "Answered conversation %s source=%s", request.conversation_id, source
        )
