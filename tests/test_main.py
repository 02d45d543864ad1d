"""Tests for the console entry point."""

from unittest.mock import create_autospec, patch

import pytest

import main
from abay import ChatService
from abay.models import Conversation


@pytest.fixture
def service():
    service = create_autospec(ChatService, instance=True)
    service.send_message.return_value = "Ответ Абая"
    service.new_conversation.return_value = Conversation(7, "console", "t", "", "")
    return service


def scripted(*lines):
    feed = iter(lines)

    def _read(_prompt: str) -> str:
        try:
            return next(feed)
        except StopIteration:
            raise EOFError from None

    return _read


def test_parse_args_defaults():
    args = main.parse_args([])

    assert args.user == "console"
    assert args.conversation is None
    assert args.lang == "ru"


def test_parse_args_rejects_unknown_language():
    with pytest.raises(SystemExit):
        main.parse_args(["--lang", "en"])


def test_run_chat_sends_messages_until_exit(service, capsys):
    logger = main.config.get_logger("test")

    code = main.run_chat(
        service, "console", 1, "ru", logger, scripted("Кто ты?", "", "/exit", "x")
    )

    assert code == 0
    service.send_message.assert_called_once_with(1, "Кто ты?", "ru")
    assert "Абай: Ответ Абая" in capsys.readouterr().out


def test_run_chat_commands(service, capsys):
    logger = main.config.get_logger("test")

    code = main.run_chat(
        service,
        "console",
        1,
        "ru",
        logger,
        scripted("/lang kk", "/lang en", "/new", "Сәлем"),
    )

    assert code == 0
    service.new_conversation.assert_called_once_with("console")
    service.send_message.assert_called_once_with(7, "Сәлем", "kk")
    assert "Поддерживаемые языки" in capsys.readouterr().out


def test_main_fails_without_api_key():
    with patch.object(type(main.config), "get_openai_api_key", return_value=""):
        assert main.main([]) == 1


def test_main_unknown_conversation(tmp_path):
    with (
        patch.object(type(main.config), "get_openai_api_key", return_value="test-key"),
        patch.object(main, "EmbeddingIndex") as mock_index,
    ):
        code = main.main(
            ["--db", str(tmp_path / "chat.sqlite"), "--conversation", "5"]
        )

    assert code == 1
    mock_index.return_value.start_background.assert_called_once()
