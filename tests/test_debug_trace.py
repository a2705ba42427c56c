"""Tests for debug_trace logging setup and tracing helpers."""
from __future__ import annotations

import logging

import pytest

import debug_trace
from debug_trace import trace_call


@pytest.fixture(params=[False, True])
def tracing(request, monkeypatch):
    monkeypatch.setattr(debug_trace, "DEBUG_TRACE", request.param)
    return request.param


def test_returns_result(tracing):
    @trace_call()
    def add(a, b):
        return a + b

    assert add(2, 3) == 5


def test_reraises(tracing):
    @trace_call()
    def boom():
        raise ValueError("nope")

    with pytest.raises(ValueError):
        boom()


def test_keeps_name():
    @trace_call("NAV")
    def navigate():
        pass

    assert navigate.__name__ == "navigate"


def test_trace_logs_when_enabled(monkeypatch, caplog):
    monkeypatch.setattr(debug_trace, "DEBUG_TRACE", True)
    with caplog.at_level("DEBUG", logger="rubra.trace"):
        debug_trace.trace("hello", "MAIN")
    assert "[MAIN] hello" in caplog.text


def test_trace_silent_when_disabled(monkeypatch, caplog):
    monkeypatch.setattr(debug_trace, "DEBUG_TRACE", False)
    with caplog.at_level("DEBUG", logger="rubra.trace"):
        debug_trace.trace("hello", "MAIN")
    assert "hello" not in caplog.text


@pytest.fixture()
def fresh_logging(monkeypatch):
    monkeypatch.setattr(debug_trace, "DEBUG_TRACE", False)
    monkeypatch.setattr(debug_trace, "_stream_handler", None)
    root = logging.getLogger()
    level = root.level
    yield root
    if debug_trace._stream_handler is not None:
        root.removeHandler(debug_trace._stream_handler)
    root.setLevel(level)


def test_configure_logging_twice_adds_one_stream_handler(fresh_logging):
    before = len(fresh_logging.handlers)
    debug_trace.configure_logging()
    debug_trace.configure_logging()
    assert len(fresh_logging.handlers) == before + 1
    assert debug_trace._stream_handler in fresh_logging.handlers
