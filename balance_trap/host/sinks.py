from __future__ import annotations

import logging
from typing import TYPE_CHECKING, List, Optional, Protocol, Sequence

import requests

if TYPE_CHECKING:
    from ..config import AppConfig


class ResponseSink(Protocol):
    def __call__(self, message: str) -> None:
        ...


class LogSink:
    """Emit each alert as a WARNING log record."""

    def __init__(self, logger_name: str = "balance_trap.alerts", address: Optional[str] = None) -> None:
        self.logger = logging.getLogger(logger_name)
        self.address = address

    def __call__(self, message: str) -> None:
        self.logger.warning(message, extra={"alert": True, "address": self.address})


class WebhookSink:
    """POST alerts to an operator endpoint as ``{"function": ..., "message": ...}``."""

    def __init__(
        self,
        url: str,
        function_name: str = "logAnomaly",
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.url = url
        self.function_name = function_name
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": "balance-trap/0.1"})

    def __call__(self, message: str) -> None:
        resp = self.session.post(
            self.url,
            json={"function": self.function_name, "message": message},
            timeout=self.timeout,
        )
        resp.raise_for_status()


class CompositeSink:
    def __init__(self, sinks: Sequence[ResponseSink]) -> None:
        self.sinks: List[ResponseSink] = list(sinks)

    def __call__(self, message: str) -> None:
        for sink in self.sinks:
            sink(message)


def build_sink(config: AppConfig) -> ResponseSink:
    sinks: List[ResponseSink] = [LogSink(address=config.runtime.trap.monitored_address)]
    if config.env.WEBHOOK_URL:
        sinks.append(
            WebhookSink(
                config.env.WEBHOOK_URL,
                function_name=config.runtime.sink.function_name,
                timeout=config.runtime.sink.timeout_sec,
            )
        )
    return sinks[0] if len(sinks) == 1 else CompositeSink(sinks)
