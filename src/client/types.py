"""Type definitions for the XML-RPC session client."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, NamedTuple

from .exceptions import RpcError


class ResponseState(str, Enum):
    UNSET = "unset"
    FAILURE = "failure"
    SUCCESS = "success"


@dataclass(frozen=True)
class Response:
    """Outcome of the most recent call on a session.

    ``UNSET`` means nothing was called since construction or the last reset,
    ``FAILURE`` carries the error that ended the call and ``SUCCESS`` carries
    the decoded payload, which may legitimately be falsy.
    """

    state: ResponseState
    value: Any = None
    error: RpcError | None = None

    @classmethod
    def unset(cls) -> Response:
        return cls(ResponseState.UNSET)

    @classmethod
    def failure(cls, error: RpcError) -> Response:
        return cls(ResponseState.FAILURE, error=error)

    @classmethod
    def success(cls, value: Any) -> Response:
        return cls(ResponseState.SUCCESS, value=value)

    @property
    def is_unset(self) -> bool:
        return self.state is ResponseState.UNSET

    @property
    def is_failure(self) -> bool:
        return self.state is ResponseState.FAILURE

    @property
    def is_success(self) -> bool:
        return self.state is ResponseState.SUCCESS

    def raise_for_failure(self) -> Any:
        """Return the payload, or raise the error recorded for a failed call."""
        if self.is_failure:
            raise self.error if self.error is not None else RpcError("Call failed")
        return self.value


class AuthParams(NamedTuple):
    """Ordered key authentication fields sent ahead of the caller's params."""

    signature: str
    domain: str
    timestamp: str
    nonce: str
    sessid: str
