from __future__ import annotations

import logging

import pytest
import requests

from balance_trap.config import AppConfig
from balance_trap.host.sinks import CompositeSink, LogSink, WebhookSink, build_sink

from .conftest import ADDRESS, make_config


class FakeResponse:
    def __init__(self, status: int) -> None:
        self.status_code = status

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")


class FakeSession:
    def __init__(self, status: int = 200) -> None:
        self.headers: dict = {}
        self.status = status
        self.posts: list = []

    def post(self, url, json=None, timeout=None):  # noqa: ANN001, ANN201
        self.posts.append((url, json, timeout))
        return FakeResponse(self.status)


def test_log_sink_emits_warning(caplog: pytest.LogCaptureFixture) -> None:
    sink = LogSink(address=ADDRESS)
    with caplog.at_level(logging.WARNING, logger="balance_trap.alerts"):
        sink("Balance change exceeded threshold")
    [record] = caplog.records
    assert record.getMessage() == "Balance change exceeded threshold"
    assert record.address == ADDRESS


def test_webhook_sink_posts_function_and_message() -> None:
    session = FakeSession()
    sink = WebhookSink("http://ops.invalid/alert", function_name="logAnomaly", timeout=3, session=session)
    sink("Balance change exceeded threshold")
    assert session.posts == [
        ("http://ops.invalid/alert", {"function": "logAnomaly", "message": "Balance change exceeded threshold"}, 3)
    ]


def test_webhook_sink_raises_on_http_error() -> None:
    sink = WebhookSink("http://ops.invalid/alert", session=FakeSession(status=503))
    with pytest.raises(requests.HTTPError):
        sink("x")


def test_composite_sink_fans_out_in_order() -> None:
    seen = []
    sink = CompositeSink([lambda m: seen.append(("a", m)), lambda m: seen.append(("b", m))])
    sink("hi")
    assert seen == [("a", "hi"), ("b", "hi")]


def test_build_sink_log_only_without_webhook() -> None:
    assert isinstance(build_sink(make_config()), LogSink)


def test_build_sink_adds_webhook() -> None:
    base = make_config()
    cfg = AppConfig(env={"WEBHOOK_URL": "http://ops.invalid/alert"}, runtime=base.runtime)
    sink = build_sink(cfg)
    assert isinstance(sink, CompositeSink)
    assert [type(s) for s in sink.sinks] == [LogSink, WebhookSink]
    assert sink.sinks[1].function_name == "logAnomaly"
