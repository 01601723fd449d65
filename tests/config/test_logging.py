from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import pytest

from gtfsgraph.config import configure_logging
from gtfsgraph.config.logging import CHATTY_LOGGERS

if TYPE_CHECKING:
    from collections.abc import Iterator


@pytest.fixture(autouse=True)
def _restore_client_loggers() -> Iterator[None]:
    yield
    for name in CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(logging.NOTSET)


@pytest.mark.parametrize(
    ("level", "expected"),
    [
        (logging.INFO, logging.WARNING),
        (logging.ERROR, logging.ERROR),
        (logging.DEBUG, logging.DEBUG),
    ],
)
def test_http_client_loggers_follow_debug_only(level: int, expected: int) -> None:
    configure_logging(level=level)

    assert [logging.getLogger(name).level for name in CHATTY_LOGGERS] == [expected, expected]
