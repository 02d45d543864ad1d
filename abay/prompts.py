"""System prompt composition from persona, language and retrieved context."""

from collections.abc import Mapping, Sequence

from .config import config
from .persona import (
    ABAY_SYSTEM_PROMPT,
    CONTEXT_HEADER,
    FACTS_ONLY_INSTRUCTION,
    GENERAL_KNOWLEDGE_INSTRUCTION,
    LANGUAGE_CLAUSES,
)


class PromptComposer:
    """Builds the system prompt sent ahead of the conversation history."""

    def __init__(
        self,
        template: str = ABAY_SYSTEM_PROMPT,
        language_clauses: Mapping[str, str] = LANGUAGE_CLAUSES,
        default_language: str | None = None,
    ) -> None:
        """Initialize the composer.

        Args:
            template: Persona instructions containing the default language clause.
            language_clauses: Response-language clause per language code.
            default_language: Language the template is written for. If None,
                uses config.DEFAULT_LANGUAGE.

        Raises:
            ValueError: If the template lacks the default language clause.
        """
        self.template = template
        self.language_clauses = dict(language_clauses)
        self.default_language = default_language or config.DEFAULT_LANGUAGE

        default_clause = self.language_clauses.get(self.default_language)
        if not default_clause or template.count(default_clause) != 1:
            msg = (
                "Persona template must contain the default language clause "
                f"exactly once: {default_clause!r}"
            )
            raise ValueError(msg)

    def persona_prompt(self, language: str) -> str:
        """Return the persona instructions for a response language."""
        clause = self.language_clauses.get(language)
        if language == self.default_language or clause is None:
            return self.template
        return self.template.replace(
            self.language_clauses[self.default_language], clause
        )

    @staticmethod
    def context_block(retrieved_chunks: Sequence[str]) -> str:
        """Instruction plus facts when any were retrieved, else general guidance."""
        if retrieved_chunks:
            facts = "\n\n".join(retrieved_chunks)
            return f"{FACTS_ONLY_INSTRUCTION}\n\n{facts}"
        return GENERAL_KNOWLEDGE_INSTRUCTION

    def compose(
        self,
        question: str,  # noqa: ARG002
        language: str,
        retrieved_chunks: Sequence[str],
    ) -> str:
        """Assemble the system prompt.

        The question itself travels in the message sequence, not here.

        Returns:
            Persona instructions followed by the context block.
        """
        return (
            f"{self.persona_prompt(language)}\n\n"
            f"{CONTEXT_HEADER}\n{self.context_block(retrieved_chunks)}"
        )
