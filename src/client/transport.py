"""HTTP transport for XML-RPC calls with connection pooling."""

import logging
import xmlrpc.client
from typing import Any, Mapping, Protocol, Sequence
from xml.parsers.expat import ExpatError

import httpx

from ._constants import USER_AGENT
from .exceptions import RemoteFaultError, TransportError

logger = logging.getLogger(__name__)


class RpcTransport(Protocol):
    """Anything able to run one XML-RPC exchange.

    ``send`` returns the decoded result, raises ``RemoteFaultError`` for a
    fault answer and ``TransportError`` when no usable response came back.
    """

    def send(self, method: str, params: Sequence[Any], headers: Mapping[str, str]) -> Any: ...


class Transport:
    """XML-RPC over HTTP POST using a pooled httpx client."""

    def __init__(self, host: str, timeout: float = 30.0, client: httpx.Client | None = None) -> None:
        self._host = host
        self._timeout = timeout
        self._client = client
        self._owns_client = client is None

    @property
    def host(self) -> str:
        return self._host

    def __enter__(self) -> "Transport":
        self._connect()
        return self

    def __exit__(self, exc_type: type | None, exc_val: Any, exc_tb: Any) -> None:
        self.close()

    def close(self) -> None:
        if self._client and self._owns_client:
            self._client.close()
            self._client = None

    def _connect(self) -> httpx.Client:
        if self._client is None:
            self._client = httpx.Client(timeout=httpx.Timeout(self._timeout),
                limits=httpx.Limits(max_connections=10, max_keepalive_connections=5))
        return self._client

    def _headers(self, extra: Mapping[str, str]) -> httpx.Headers:
        headers = httpx.Headers({"Content-Type": "text/xml", "User-Agent": USER_AGENT})
        for k, v in extra.items():
            if k not in headers:
                headers[k] = v
        return headers

    def encode(self, method: str, params: Sequence[Any]) -> bytes:
        try:
            body = xmlrpc.client.dumps(tuple(params), methodname=method, allow_none=True)
        except (TypeError, OverflowError) as e:
            raise TransportError(f"Cannot encode request for {method}: {e}") from e
        return body.encode("utf-8")

    def decode(self, content: bytes) -> Any:
        try:
            params, _ = xmlrpc.client.loads(content, use_builtin_types=True)
        except xmlrpc.client.Fault as e:
            raise RemoteFaultError(e.faultCode, e.faultString) from e
        except (ExpatError, xmlrpc.client.ResponseError, ValueError, TypeError, IndexError, KeyError) as e:
            raise TransportError(f"Malformed XML-RPC response: {e}") from e
        return params[0] if params else None

    def send(self, method: str, params: Sequence[Any], headers: Mapping[str, str]) -> Any:
        body = self.encode(method, params)
        client = self._connect()
        try:
            resp = client.post(self._host, content=body, headers=self._headers(headers))
        except UnicodeEncodeError as e:
            raise TransportError(f"Header values must be ASCII: {e}") from e
        except (httpx.TimeoutException, httpx.RequestError) as e:
            raise TransportError(f"Request to {self._host} failed: {e}") from e
        logger.debug("Response: %s status=%d bytes=%d", method, resp.status_code, len(resp.content))
        if resp.status_code >= 400:
            raise TransportError(f"HTTP {resp.status_code} from {self._host}", resp.status_code)
        if not resp.content:
            raise TransportError(f"Empty response from {self._host}", resp.status_code)
        return self.decode(resp.content)
