"""OpenAI chat completions backend for the persona answers."""

from collections.abc import Sequence

from openai import APITimeoutError, OpenAI, OpenAIError

from .config import config
from .exceptions import (
    BackendMalformedResponseError,
    BackendTimeoutError,
    BackendTransportError,
)

logger = config.get_logger(__name__)


class ChatBackend:
    """Generates replies from a system prompt and a message sequence."""

    def __init__(  # noqa: PLR0913,PLR0917
        self,
        api_key: str | None = None,
        model: str | None = None,
        max_tokens: int | None = None,
        temperature: float | None = None,
        timeout: float | None = None,
    ) -> None:
        """Initialize the backend.

        Args:
            api_key: OpenAI API key. If None, reads from OPENAI_API_KEY.
            model: Chat model name. If None, uses config.CHAT_MODEL.
            max_tokens: Generation cap. If None, uses config.CHAT_MAX_TOKENS.
            temperature: Sampling temperature. If None, uses
                config.CHAT_TEMPERATURE.
            timeout: Request timeout in seconds. If None, uses
                config.CHAT_TIMEOUT_SECONDS.
        """
        default_headers = config.get_api_headers()
        self.client = OpenAI(
            api_key=api_key or config.get_openai_api_key(),
            base_url=config.OPENAI_BASE_URL,
            default_headers=default_headers or None,
            max_retries=0,
        )
        self.model = model or config.CHAT_MODEL
        self.max_tokens = config.CHAT_MAX_TOKENS if max_tokens is None else max_tokens
        self.temperature = (
            config.CHAT_TEMPERATURE if temperature is None else temperature
        )
        self.timeout = config.CHAT_TIMEOUT_SECONDS if timeout is None else timeout

    def generate(
        self,
        system_prompt: str,
        messages: Sequence[dict[str, str]],
        timeout: float | None = None,
    ) -> str:
        """Generate a reply.

        Returns:
            The generated text, stripped.

        Raises:
            BackendTimeoutError: If the call exceeds the timeout.
            BackendTransportError: If the API request fails.
            BackendMalformedResponseError: If the response carries no text.
        """
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "system", "content": system_prompt}, *messages],
                max_tokens=self.max_tokens,
                temperature=self.temperature,
                timeout=self.timeout if timeout is None else timeout,
            )
        except APITimeoutError as exc:
            msg = "Chat completion timed out"
            raise BackendTimeoutError(msg) from exc
        except OpenAIError as exc:
            msg = f"Chat completion failed: {exc!s}"
            raise BackendTransportError(msg) from exc

        if not response.choices:
            msg = "Chat completion returned no choices"
            raise BackendMalformedResponseError(msg)

        content = response.choices[0].message.content
        if not content or not content.strip():
            msg = "Chat completion returned empty content"
            raise BackendMalformedResponseError(msg)

        return content.strip()
