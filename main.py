"""Command-line entry point for chatting with Abay in the console."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from abay import (
    ChatService,
    ConversationStore,
    EmbeddingIndex,
    EmbeddingService,
    build_pipeline,
)
from abay.config import config
from abay.exceptions import ConversationNotFoundError
from abay.persona import SUPPORTED_LANGUAGES

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from logging import Logger

EXIT_COMMANDS = {"/exit", "/quit"}
NEW_COMMAND = "/new"
LANG_COMMAND = "/lang"


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Build the CLI parser and read command-line arguments."""  # noqa: DOC201
    parser = argparse.ArgumentParser(
        description="Talk to Abay Kunanbayev in the console.",
    )
    parser.add_argument(
        "--user",
        default="console",
        help="User identifier owning the conversations (default: console).",
    )
    parser.add_argument(
        "--conversation",
        type=int,
        default=None,
        help="Conversation id to continue (default: most recent).",
    )
    parser.add_argument(
        "--lang",
        choices=SUPPORTED_LANGUAGES,
        default=config.DEFAULT_LANGUAGE,
        help="Response language (default: %(default)s).",
    )
    parser.add_argument(
        "--db",
        type=Path,
        default=config.DATABASE_PATH,
        help="Path to the SQLite conversation database.",
    )
    return parser.parse_args(argv)


def run_chat(  # noqa: PLR0913,PLR0917
    service: ChatService,
    user_id: str,
    conversation_id: int,
    language: str,
    logger: Logger,
    read_line: Callable[[str], str] = input,
) -> int:
    """Read questions until EOF or an exit command and print the replies."""  # noqa: DOC201
    while True:
        try:
            line = read_line("Вы: ").strip()
        except (EOFError, KeyboardInterrupt):
            logger.info("Chat stopped by user")
            return 0

        if not line:
            continue
        if line in EXIT_COMMANDS:
            return 0
        if line == NEW_COMMAND:
            conversation_id = service.new_conversation(user_id).conversation_id
            print(f"Новый чат #{conversation_id}")
            continue
        if line.startswith(LANG_COMMAND):
            requested = line.removeprefix(LANG_COMMAND).strip()
            if requested in SUPPORTED_LANGUAGES:
                language = requested
                logger.info("Language of user %s: %s", user_id, language)
            else:
                print(f"Поддерживаемые языки: {', '.join(SUPPORTED_LANGUAGES)}")
            continue

        reply = service.send_message(conversation_id, line, language)
        print(f"Абай: {reply}")


def main(argv: Sequence[str] | None = None) -> int:
    """Validate configuration, warm up embeddings and start the chat loop."""  # noqa: DOC201
    args = parse_args(argv)

    config.setup_logging()
    logger = config.get_logger(__name__)

    try:
        config.validate()
    except ValueError:
        logger.exception("Configuration invalid")
        return 1

    index = EmbeddingIndex(EmbeddingService())
    index.start_background()

    store = ConversationStore(args.db)
    service = ChatService(store, build_pipeline(index, store))

    if args.conversation is None:
        conversation = service.start_session(args.user)
    else:
        store.ensure_user(args.user)
        conversation = store.get_conversation(args.conversation)
        if conversation is None:
            logger.error("Conversation not found: %s", args.conversation)
            return 1

    logger.info(
        "Abay is listening in conversation %s (language=%s)",
        conversation.conversation_id,
        args.lang,
    )

    try:
        return run_chat(
            service,
            args.user,
            conversation.conversation_id,
            args.lang,
            logger,
        )
    except ConversationNotFoundError:
        logger.exception("Conversation disappeared")
        return 1


if __name__ == "__main__":
    sys.exit(main())
