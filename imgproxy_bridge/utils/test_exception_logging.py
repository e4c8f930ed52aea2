import logging

import httpx

from imgproxy_bridge.utils.exception_logging import (
    format_exception_message,
    log_exception_with_details,
)


class BrokenStr(Exception):
    def __str__(self):
        raise RuntimeError("boom")


def test_format_with_message():
    assert format_exception_message(httpx.ReadError("reset")) == "ReadError: reset"


def test_format_without_message():
    assert format_exception_message(httpx.ReadTimeout("")) == "ReadTimeout"


def test_format_none():
    assert format_exception_message(None) == "None"


def test_format_broken_str_falls_back_to_repr():
    assert format_exception_message(BrokenStr()).startswith("BrokenStr: BrokenStr(")


def test_log_includes_cause(caplog):
    logger = logging.getLogger("test.exception_logging")
    try:
        try:
            raise ConnectionResetError("peer went away")
        except ConnectionResetError as inner:
            raise httpx.ReadError("reset") from inner
    except httpx.ReadError as e:
        with caplog.at_level(logging.ERROR, logger="test.exception_logging"):
            log_exception_with_details(logger, "[Imgproxy]", e)

    assert "[Imgproxy] Exception: ReadError: reset" in caplog.text
    assert "caused by ConnectionResetError: peer went away" in caplog.text
    assert caplog.records[0].exc_info is not None


def test_log_includes_implicit_context(caplog):
    logger = logging.getLogger("test.exception_logging")
    try:
        try:
            raise ConnectionResetError("peer went away")
        except ConnectionResetError:
            raise httpx.ReadError("reset")
    except httpx.ReadError as e:
        with caplog.at_level(logging.ERROR, logger="test.exception_logging"):
            log_exception_with_details(logger, "[Imgproxy]", e)

    assert "caused by ConnectionResetError: peer went away" in caplog.text


def test_log_without_cause(caplog):
    logger = logging.getLogger("test.exception_logging")
    with caplog.at_level(logging.ERROR, logger="test.exception_logging"):
        log_exception_with_details(logger, "[Imgproxy]", httpx.ReadError("reset"))

    assert "[Imgproxy] Exception: ReadError: reset" in caplog.text
    assert "caused by" not in caplog.text
