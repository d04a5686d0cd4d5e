"""Key authentication: nonce generation and HMAC-SHA256 request signing."""

import hashlib
import hmac
import time
from uuid import uuid4

from .exceptions import AuthenticationError
from .types import AuthParams


def make_nonce() -> str:
    """Return a token unique to this request."""
    return uuid4().hex


def build_signing_payload(timestamp: str, domain: str, nonce: str, method: str) -> bytes:
    """Build the canonical payload for signing (fields joined by ';')."""
    return ";".join((timestamp, domain, nonce, method)).encode("utf-8")


def compute_signature(api_key: str, timestamp: str, domain: str, nonce: str, method: str) -> str:
    """Sign a call with the shared API key. Returns the hex-encoded HMAC-SHA256 digest."""
    if not api_key:
        raise AuthenticationError("API key is required to sign requests")
    payload = build_signing_payload(timestamp, domain, nonce, method)
    return hmac.new(api_key.encode("utf-8"), payload, hashlib.sha256).hexdigest()


def build_auth_params(
    api_key: str, domain: str, method: str, sessid: str | None = None,
    timestamp: str | None = None, nonce: str | None = None,
) -> AuthParams:
    """Build the five authentication fields for ``method``.

    ``timestamp`` and ``nonce`` are generated when omitted. A missing session
    id is sent as an empty string.
    """
    timestamp = timestamp if timestamp is not None else str(int(time.time()))
    nonce = nonce if nonce is not None else make_nonce()
    signature = compute_signature(api_key, timestamp, domain, nonce, method)
    return AuthParams(signature=signature, domain=domain, timestamp=timestamp, nonce=nonce, sessid=sessid or "")
