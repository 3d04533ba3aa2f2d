import logging

import pytest
from loguru import logger

from config import configure_loguru
from config.logger import InterceptHandler, _resolve_level


@pytest.mark.parametrize(("level", "expected"), [("debug", logging.DEBUG), ("WARNING", logging.WARNING), (15, 15)])
def test_resolve_level(level: int | str, expected: int) -> None:
    assert _resolve_level(level) == expected


def test_resolve_level_rejects_unknown() -> None:
    with pytest.raises(ValueError):
        _resolve_level("chatty")


def test_configure_loguru_routes_std_logging() -> None:
    configure_loguru()

    root = logging.getLogger()
    assert any(isinstance(handler, InterceptHandler) for handler in root.handlers)
    assert logging.getLogger("openai").level == logging.WARNING
    assert logging.getLogger("httpx").level == logging.WARNING


def test_intercepted_records_reach_loguru() -> None:
    configure_loguru()
    messages: list[str] = []
    sink_id = logger.add(lambda message: messages.append(message.record["message"]), level="DEBUG")
    try:
        logging.getLogger("redis").warning("connection pool exhausted")
    finally:
        logger.remove(sink_id)

    assert "connection pool exhausted" in messages
