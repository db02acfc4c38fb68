"""Shared test fixtures for centry.

Provides a recording mock transport so tests can inspect every request the
client sends without touching the network, plus automatic resetting of the
global output manager.
"""

from __future__ import annotations

import json
from typing import Any, Callable

import httpx
import pytest

from centry.client import Centry
from centry.output import reset_output


CLIENT_ID = "4f3d8e65a417c386ab76a6550974a26713c811c5b81c1f0fa2e7726562fbb702"
CLIENT_SECRET = "13b1549e58c36acfe7e43345676b58e428288116f06f818a631fb12fc447faf2"
REDIRECT_URI = "urn:ietf:wg:oauth:2.0:oob"


class RecordingTransport(httpx.MockTransport):
    """MockTransport that remembers every request it served."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self.requests: list[httpx.Request] = []

        def _record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(_record)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self) -> Any:
        return json.loads(self.last.content)


def token_response(
    access_token: str = "access-1",
    refresh_token: str | None = "refresh-1",
    scope: str | None = "public read_orders",
    **extra: Any,
) -> dict[str, Any]:
    """Build a token endpoint JSON body."""
    data: dict[str, Any] = {
        "access_token": access_token,
        "token_type": "Bearer",
        "expires_in": 7200,
        "created_at": 1_700_000_000,
    }
    if refresh_token is not None:
        data["refresh_token"] = refresh_token
    if scope is not None:
        data["scope"] = scope
    data.update(extra)
    return data


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The CLI installs a manager bound to the CliRunner's streams; resetting
    forces a fresh one on next use.
    """
    yield
    reset_output()


@pytest.fixture
def make_sdk() -> Callable[..., tuple[Centry, RecordingTransport]]:
    """Factory returning a client wired to a :class:`RecordingTransport`."""

    def _factory(
        handler: Callable[[httpx.Request], httpx.Response] | None = None,
        **kwargs: Any,
    ) -> tuple[Centry, RecordingTransport]:
        if handler is None:
            def handler(request: httpx.Request) -> httpx.Response:
                return httpx.Response(200, json={"ok": True})

        transport = RecordingTransport(handler)
        sdk = Centry(CLIENT_ID, CLIENT_SECRET, REDIRECT_URI, transport=transport, **kwargs)
        return sdk, transport

    return _factory
