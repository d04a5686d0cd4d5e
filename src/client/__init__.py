"""Chainable XML-RPC client with Drupal-style key authentication."""

from ._constants import CLIENT_VERSION
from .auth import build_auth_params, compute_signature, make_nonce
from .exceptions import AuthenticationError, MissingMethodError, RemoteFaultError, RpcError, TransportError
from .identity import default_host_identity, static_identity
from .session import RpcSession
from .transport import RpcTransport, Transport
from .types import AuthParams, Response, ResponseState

__all__ = [
    "CLIENT_VERSION",
    "RpcSession", "Transport", "RpcTransport",
    "Response", "ResponseState", "AuthParams",
    "build_auth_params", "compute_signature", "make_nonce",
    "default_host_identity", "static_identity",
    "RpcError", "MissingMethodError", "AuthenticationError", "TransportError", "RemoteFaultError",
]

__version__ = CLIENT_VERSION
