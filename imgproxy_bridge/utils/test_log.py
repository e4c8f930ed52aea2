import logging

import pytest

from imgproxy_bridge.utils import mask_secret, token_fingerprint
from imgproxy_bridge.utils.log import HandlerLogger, LoggingOptions


def test_default_level_only_emits_errors(caplog):
    log = HandlerLogger()
    with caplog.at_level(logging.DEBUG, logger="uvicorn.error"):
        log.debug("debug message")
        log.warn("warn message")
        log.error("error message")

    assert "debug message" not in caplog.text
    assert "warn message" not in caplog.text
    assert "error message" in caplog.text


def test_warn_level(caplog):
    log = HandlerLogger(LoggingOptions(level="warn"))
    with caplog.at_level(logging.DEBUG, logger="uvicorn.error"):
        log.debug("debug message")
        log.warn("warn message")

    assert "debug message" not in caplog.text
    assert "warn message" in caplog.text


def test_injected_logger(caplog):
    custom = logging.getLogger("imgproxy.custom")
    log = HandlerLogger(LoggingOptions(level="debug", logger=custom))
    with caplog.at_level(logging.DEBUG, logger="imgproxy.custom"):
        log.debug("hello")

    assert [r.name for r in caplog.records] == ["imgproxy.custom"]


def test_unknown_level():
    with pytest.raises(ValueError):
        LoggingOptions(level="trace")


def test_mask_secret():
    assert mask_secret("/abcdefgh/plain/x", "abcdefgh") == "/abcd****/plain/x"
    assert mask_secret("/plain/x", None) == "/plain/x"
    assert mask_secret("/plain/x", "") == "/plain/x"


def test_token_fingerprint():
    assert token_fingerprint(None) == "<empty>"
    fingerprint = token_fingerprint("secret-token")
    assert "secret-token" not in fingerprint
    assert fingerprint.startswith("len=12 sha256=")
    assert fingerprint == token_fingerprint("secret-token")
