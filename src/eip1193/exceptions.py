from collections.abc import Mapping
from typing import Any, ClassVar, Optional

USER_REJECTED_REQUEST = 4001
UNAUTHORIZED = 4100
UNSUPPORTED_METHOD = 4200
DISCONNECTED = 4900
CHAIN_DISCONNECTED = 4901

PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603

RESERVED_PROVIDER_CODES = frozenset((USER_REJECTED_REQUEST, UNAUTHORIZED, UNSUPPORTED_METHOD))
"""Codes the provider assigns on its own policy decisions."""

STANDARD_ERROR_MESSAGES: dict[int, str] = {
    USER_REJECTED_REQUEST: "The user rejected the request.",
    UNAUTHORIZED: "The requested method and/or account has not been authorized by the user.",
    UNSUPPORTED_METHOD: "The Provider does not support the requested method.",
    DISCONNECTED: "The Provider is disconnected from all chains.",
    CHAIN_DISCONNECTED: "The Provider is not connected to the requested chain.",
    PARSE_ERROR: "Invalid JSON was received by the server.",
    INVALID_REQUEST: "The JSON sent is not a valid Request object.",
    METHOD_NOT_FOUND: "The method does not exist / is not available.",
    INVALID_PARAMS: "Invalid method parameter(s).",
    INTERNAL_ERROR: "Internal JSON-RPC error.",
    -32000: "Invalid input.",
    -32001: "Resource not found.",
    -32002: "Resource unavailable.",
    -32003: "Transaction rejected.",
    -32004: "Method not supported.",
    -32005: "Request limit exceeded.",
}
"""Messages for the EIP-1193 provider codes and the EIP-1474 JSON-RPC codes."""


def is_error_code(value: Any) -> bool:
    """
    ``True`` when the value can be used as an error code.
    Booleans are integers in Python, but are never valid codes.
    """
    return isinstance(value, int) and not isinstance(value, bool)


def get_standard_message(code: int) -> str:
    """
    The standard human-readable message for the given code,
    or the generic internal-error message when the code is not known.
    """
    if code in STANDARD_ERROR_MESSAGES:
        return STANDARD_ERROR_MESSAGES[code]
    elif -32099 <= code <= -32000:
        return "Server error."

    return STANDARD_ERROR_MESSAGES[INTERNAL_ERROR]


class EIP1193Exception(Exception):
    """
    An exception raised by the provider package.
    """


class ConfigError(EIP1193Exception):
    """
    Raised when a problem occurs from the configuration.
    """


class ClientError(EIP1193Exception):
    """
    Raised by a client when it fails to execute a method.
    The optional ``error`` is the raw error object the remote side reported
    (e.g. the ``error`` member of a JSON-RPC response).
    """

    def __init__(self, message: str, error: Optional[Mapping] = None):
        self.error = error
        super().__init__(message)


class ClientNotConnectedError(ClientError):
    """
    Raised when a client is used before it is connected.
    """

    def __init__(self):
        message = "Client is not connected."
        super().__init__(message, error={"code": DISCONNECTED, "message": message})


class ProviderRpcError(EIP1193Exception):
    """
    The error every failed request rejects with.

    Args:
        message (Optional[str]): A human-readable message. Defaults to the standard
          message for the code when empty.
        code (Optional[int]): The error code. Defaults to the class's code.
        data (Any): Additional information about the error.
    """

    DEFAULT_CODE: ClassVar[int] = INTERNAL_ERROR

    def __init__(self, message: Optional[str] = None, code: Optional[int] = None, data: Any = None):
        code = self.DEFAULT_CODE if code is None else code
        if not is_error_code(code):
            raise TypeError(f"Error code must be an integer, got '{code!r}'.")

        message = message.strip() if isinstance(message, str) else ""
        self.code: int = code
        self.message: str = message or get_standard_message(code)
        self.data = data
        super().__init__(self.message)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} code={self.code} message={self.message!r}>"

    @classmethod
    def from_code(
        cls, code: int, message: Optional[str] = None, data: Any = None
    ) -> "ProviderRpcError":
        """
        Create the most specific error type for the given code.

        Args:
            code (int): The error code.
            message (Optional[str]): The message. Defaults to the standard one.
            data (Any): Additional error data.

        Returns:
            :class:`~eip1193.exceptions.ProviderRpcError`
        """
        error_cls = _ERRORS_BY_CODE.get(code, ProviderRpcError)
        return error_cls(message=message, code=code, data=data)

    def to_dict(self) -> dict:
        """
        The error as a JSON-RPC ``error`` member.
        """
        result: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.data is not None:
            result["data"] = self.data

        return result


class UserRejectedRequestError(ProviderRpcError):
    """
    Raised when the user rejected the request.
    """

    DEFAULT_CODE = USER_REJECTED_REQUEST


class UnauthorizedError(ProviderRpcError):
    """
    Raised when the requested method and/or account
    has not been authorized by the user.
    """

    DEFAULT_CODE = UNAUTHORIZED


class UnsupportedMethodError(ProviderRpcError):
    """
    Raised when the provider does not support the requested method.
    """

    DEFAULT_CODE = UNSUPPORTED_METHOD


class DisconnectedError(ProviderRpcError):
    """
    Raised when the provider is disconnected from all chains.
    """

    DEFAULT_CODE = DISCONNECTED


class ChainDisconnectedError(ProviderRpcError):
    """
    Raised when the provider is not connected to the requested chain.
    """

    DEFAULT_CODE = CHAIN_DISCONNECTED


class ParseError(ProviderRpcError):
    DEFAULT_CODE = PARSE_ERROR


class InvalidRequestError(ProviderRpcError):
    """
    Raised when a request is malformed, such as when missing a method name.
    """

    DEFAULT_CODE = INVALID_REQUEST


class MethodNotFoundError(ProviderRpcError):
    DEFAULT_CODE = METHOD_NOT_FOUND


class InvalidParamsError(ProviderRpcError):
    """
    Raised when request parameters are neither a sequence nor a mapping.
    """

    DEFAULT_CODE = INVALID_PARAMS


class InternalError(ProviderRpcError):
    DEFAULT_CODE = INTERNAL_ERROR


_ERRORS_BY_CODE: dict[int, type[ProviderRpcError]] = {
    cls.DEFAULT_CODE: cls
    for cls in (
        UserRejectedRequestError,
        UnauthorizedError,
        UnsupportedMethodError,
        DisconnectedError,
        ChainDisconnectedError,
        ParseError,
        InvalidRequestError,
        MethodNotFoundError,
        InvalidParamsError,
        InternalError,
    )
}
