import json
import re
from collections.abc import Mapping
from typing import Any, Optional

import requests

from eip1193.exceptions import (
    DISCONNECTED,
    INTERNAL_ERROR,
    PARSE_ERROR,
    UNAUTHORIZED,
    UNSUPPORTED_METHOD,
    USER_REJECTED_REQUEST,
    ClientError,
    ProviderRpcError,
    is_error_code,
)

_USER_REJECTED_PATTERN = re.compile(
    r"user (rejected|denied|cancel+ed)|rejected by (the )?user", re.IGNORECASE
)
_UNAUTHORIZED_PATTERN = re.compile(
    r"\bunauthori[sz]ed\b|not (been )?authori[sz]ed|permission denied", re.IGNORECASE
)
_UNSUPPORTED_PATTERN = re.compile(
    r"does not exist/is not available"
    r"|method (\S+ )?not (found|supported)"
    r"|^Unknown RPC Endpoint"
    r"|RPC Endpoint has not been implemented"
    r"|method not allowed",
    re.IGNORECASE,
)

_UNAUTHORIZED_HTTP_STATUSES = (401, 403)
_UNSUPPORTED_HTTP_STATUSES = (405, 501)


class ErrorClassifier:
    """
    Maps whatever a failed request produced to a
    :class:`~eip1193.exceptions.ProviderRpcError`.

    Errors that already are provider errors are returned unchanged.
    Error objects with an integer ``code`` and a ``message`` keep their code.
    Everything else is classified, in order of priority: the reserved provider
    codes (``4001``, ``4100``, ``4200``), then JSON-RPC protocol codes,
    then transport errors, then a generic internal error.
    """

    def classify(self, failure: Any) -> ProviderRpcError:
        if isinstance(failure, ProviderRpcError):
            return failure

        error_object = _get_error_object(failure)
        if error_object is not None and (conforming := _from_conforming(error_object)):
            return conforming

        elif error_object is None and (conforming := _from_conforming(_get_attributes(failure))):
            # An error-like object, such as a client library's RPC error type.
            return conforming

        message = _get_message(failure, error_object)
        data = _get_data(failure, error_object)

        if code := _get_reserved_code(failure, message):
            return ProviderRpcError.from_code(code, message=message, data=data)

        elif (code := _get_protocol_code(failure, error_object)) is not None:
            return ProviderRpcError.from_code(code, message=message, data=data)

        elif isinstance(failure, (requests.ConnectionError, ConnectionError)):
            return ProviderRpcError.from_code(DISCONNECTED, message=message, data=data)

        elif isinstance(failure, (requests.Timeout, TimeoutError)):
            return ProviderRpcError.from_code(
                INTERNAL_ERROR, message=message or "The request timed out.", data=data
            )

        return ProviderRpcError.from_code(INTERNAL_ERROR, message=message, data=data)

    __call__ = classify


def _get_error_object(failure: Any) -> Optional[Mapping]:
    # The raw error object, e.g. a JSON-RPC error member.
    if isinstance(failure, ClientError):
        failure = failure.error

    if not isinstance(failure, Mapping):
        return None

    elif isinstance(failure.get("error"), Mapping):
        # A JSON-RPC response envelope.
        return failure["error"]

    return failure


def _get_attributes(failure: Any) -> dict:
    return {
        key: getattr(failure, key) for key in ("code", "message", "data") if hasattr(failure, key)
    }


def _from_conforming(error: Mapping) -> Optional[ProviderRpcError]:
    code = error.get("code")
    message = error.get("message")
    if not is_error_code(code) or not isinstance(message, str) or not message.strip():
        return None

    return ProviderRpcError.from_code(code, message=message, data=error.get("data"))


def _get_message(failure: Any, error_object: Optional[Mapping]) -> str:
    if error_object is not None and isinstance(msg := error_object.get("message"), str):
        if msg.strip():
            return msg

    if isinstance(failure, ClientError):
        return str(failure)

    elif isinstance(msg := getattr(failure, "message", None), str) and msg.strip():
        return msg

    elif isinstance(failure, BaseException):
        return str(failure)

    elif isinstance(failure, str):
        return failure

    elif failure is None or error_object is not None:
        return ""

    return repr(failure)


def _get_data(failure: Any, error_object: Optional[Mapping]) -> Any:
    if error_object is not None:
        return error_object.get("data")

    elif isinstance(failure, requests.HTTPError) and failure.response is not None:
        return {"status": failure.response.status_code}

    return getattr(failure, "data", None)


def _get_http_status(failure: Any) -> Optional[int]:
    if isinstance(failure, requests.HTTPError) and failure.response is not None:
        return failure.response.status_code

    return None


def _get_reserved_code(failure: Any, message: str) -> Optional[int]:
    status = _get_http_status(failure)
    if _USER_REJECTED_PATTERN.search(message):
        return USER_REJECTED_REQUEST

    elif (
        isinstance(failure, PermissionError)
        or status in _UNAUTHORIZED_HTTP_STATUSES
        or _UNAUTHORIZED_PATTERN.search(message)
    ):
        return UNAUTHORIZED

    elif (
        isinstance(failure, NotImplementedError)
        or status in _UNSUPPORTED_HTTP_STATUSES
        or _UNSUPPORTED_PATTERN.search(message)
    ):
        return UNSUPPORTED_METHOD

    return None


def _get_protocol_code(failure: Any, error_object: Optional[Mapping]) -> Optional[int]:
    if isinstance(failure, json.JSONDecodeError):
        return PARSE_ERROR

    code = error_object.get("code") if error_object is not None else None
    if code is None:
        code = getattr(failure, "code", None)

    if is_error_code(code):
        return code

    elif isinstance(code, str):
        try:
            return int(code, 0)
        except ValueError:
            return None

    return None


def classify(failure: Any) -> ProviderRpcError:
    """
    Classify the failure using the default :class:`~eip1193.classifier.ErrorClassifier`.
    """
    return _default_classifier.classify(failure)


_default_classifier = ErrorClassifier()
