"""Chainable XML-RPC session with optional key authentication."""

from __future__ import annotations

import logging
from typing import Any, Mapping

from ._constants import SESSION_FIELD
from .auth import build_auth_params
from .exceptions import AuthenticationError, MissingMethodError, RemoteFaultError, RpcError, TransportError
from .identity import HostIdentity, default_host_identity
from .transport import RpcTransport, Transport
from .types import AuthParams, Response

logger = logging.getLogger(__name__)


class RpcSession:
    """Session against one XML-RPC endpoint.

    Every call records its outcome as the session response and returns the
    session, so calls chain::

        session = RpcSession("https://example.com/services/xmlrpc", api_key)
        session.system.connect()["user.login"](user, password)["node.save"](node)
        node = session.get_response().value

    With ``persist`` enabled (the default when an API key is given) a failed
    call turns every later call into a no-op until ``reset()``, and the
    session id returned by the remote end is signed into later calls.
    Failures are logged, never raised; see ``Response.raise_for_failure``.
    """

    def __init__(self, host: str, api_key: str | None = None, *, domain: str | None = None,
                 persist: bool | None = None, headers: Mapping[str, str] | None = None,
                 transport: RpcTransport | None = None, host_identity: HostIdentity | None = None,
                 timeout: float = 30.0, expand_auth: bool = False) -> None:
        self._host = host
        self._api_key = api_key
        self._persist = bool(api_key) if persist is None else persist
        self._host_identity = host_identity or default_host_identity
        self._domain = ""
        self._headers: dict[str, str] = {}
        self._sessid: str | None = None
        self._response = Response.unset()
        self._expand_auth = expand_auth
        self._transport = transport if transport is not None else Transport(host, timeout)
        self.set_domain(domain)
        self.set_headers(headers)

    @property
    def host(self) -> str:
        return self._host

    @property
    def domain(self) -> str:
        return self._domain

    @property
    def api_key(self) -> str | None:
        return self._api_key

    @property
    def persist(self) -> bool:
        return self._persist

    @property
    def session_id(self) -> str | None:
        return self._sessid

    @property
    def headers(self) -> dict[str, str]:
        return dict(self._headers)

    @property
    def response(self) -> Response:
        return self._response

    def __enter__(self) -> RpcSession:
        return self

    def __exit__(self, *args) -> None:
        self.close()

    def close(self) -> None:
        if isinstance(self._transport, Transport):
            self._transport.close()

    def call(self, method: str | None = None, *params: Any) -> RpcSession:
        """Invoke ``method`` on the remote host and record the outcome."""
        if self._persist and self._response.is_failure:
            logger.debug("Skipping %s: previous call failed", method)
            return self
        if not method:
            self._fail(MissingMethodError(f"{type(self).__name__}.call missing method name"), logging.ERROR)
            return self

        args: list[Any] = []
        signed = False
        if self._persist and self._sessid:
            if self._api_key:
                auth = self.build_auth_params(method)
                if self._expand_auth:
                    args.extend(auth)
                else:
                    args.append(tuple(auth))
                signed = True
            else:
                logger.warning("Session id present but no API key set; sending %s unauthenticated", method)
        args.extend(params)

        logger.debug("Request: %s params=%d signed=%s", method, len(params), signed)
        try:
            value = self._transport.send(method, args, self._headers)
        except (RemoteFaultError, TransportError) as e:
            self._fail(e, logging.WARNING)
            return self

        self._response = Response.success(value)
        if self._persist and isinstance(value, Mapping) and SESSION_FIELD in value:
            self._sessid = value[SESSION_FIELD]
            logger.debug("Session id captured from %s", method)
        return self

    invoke = call

    def build_auth_params(self, method: str) -> AuthParams:
        """Build signed key authentication fields for ``method``."""
        if not self._api_key:
            raise AuthenticationError("Cannot build auth params without an API key")
        return build_auth_params(self._api_key, self._domain, method, self._sessid)

    def get_response(self) -> Response:
        return self._response

    def set_domain(self, domain: str | None = None) -> RpcSession:
        self._domain = domain if domain else self._host_identity()
        return self

    def set_headers(self, headers: Mapping[str, str] | None = None) -> RpcSession:
        """Add headers sent with every call. Headers already set are kept."""
        for k, v in (headers or {}).items():
            self._headers.setdefault(k, v)
        return self

    def set_persist(self, persist: bool = True) -> RpcSession:
        self._persist = persist
        return self

    def set_api_key(self, key: str | None) -> RpcSession:
        self._api_key = key
        return self

    def reset(self) -> RpcSession:
        """Forget the last response. The session id is kept."""
        self._response = Response.unset()
        return self

    def clear_session(self) -> RpcSession:
        self._sessid = None
        return self

    def _fail(self, error: RpcError, level: int) -> None:
        self._response = Response.failure(error)
        logger.log(level, "%s", error)

    def __getitem__(self, method: str) -> _Method:
        return _Method(self, method)

    def __getattr__(self, name: str) -> _Method:
        if name.startswith("_"):
            raise AttributeError(name)
        return _Method(self, name)


class _Method:
    """Remote method bound to a session; attribute access extends dotted names."""

    def __init__(self, session: RpcSession, name: str) -> None:
        self._session = session
        self._name = name

    def __getattr__(self, name: str) -> _Method:
        if name.startswith("_"):
            raise AttributeError(name)
        return _Method(self._session, f"{self._name}.{name}")

    def __call__(self, *params: Any) -> RpcSession:
        return self._session.call(self._name, *params)

    def __repr__(self) -> str:
        return f"<remote method {self._name}>"
