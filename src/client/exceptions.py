"""Exception types for the XML-RPC session client."""


class RpcError(Exception):
    """Base exception for all RPC client errors."""
    pass


class MissingMethodError(RpcError):
    """A call was issued without a remote method name."""
    pass


class AuthenticationError(RpcError):
    """Key authentication parameters cannot be built (no API key configured)."""
    pass


class TransportError(RpcError):
    """The exchange with the remote host produced no usable response."""
    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class RemoteFaultError(RpcError):
    """The remote host answered with a well-formed XML-RPC fault."""
    def __init__(self, fault_code: int, fault_string: str) -> None:
        super().__init__(f"xmlrpc: {fault_string} ({fault_code})")
        self.fault_code = fault_code
        self.fault_string = fault_string
