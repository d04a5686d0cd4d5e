"""Pytest fixtures for client and CLI tests."""
from typing import Any, Mapping, Sequence

import pytest

from src.client import RpcSession, static_identity


class FakeTransport:
    """Records every exchange and answers from a queue of canned results.

    Queue entries that are exceptions are raised instead of returned.
    """

    def __init__(self, *results: Any) -> None:
        self.results = list(results)
        self.calls: list[tuple[str, list, dict]] = []

    def queue(self, *results: Any) -> "FakeTransport":
        self.results.extend(results)
        return self

    def send(self, method: str, params: Sequence[Any], headers: Mapping[str, str]) -> Any:
        self.calls.append((method, list(params), dict(headers)))
        result = self.results.pop(0) if self.results else None
        if isinstance(result, Exception):
            raise result
        return result

    @property
    def methods(self) -> list[str]:
        return [c[0] for c in self.calls]


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def session(transport: FakeTransport) -> RpcSession:
    """Plain session without key authentication."""
    return RpcSession("http://example.test/xmlrpc", transport=transport, host_identity=static_identity("client.test"))


@pytest.fixture
def keyed_session(transport: FakeTransport) -> RpcSession:
    """Key-authenticated session with API key 'k' and domain 'd'."""
    return RpcSession("http://example.test/xmlrpc", "k", domain="d", transport=transport)
