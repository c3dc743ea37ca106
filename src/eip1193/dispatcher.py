from collections.abc import Callable, Mapping
from typing import Any, Optional

from eip1193.api import ClientAPI, Params
from eip1193.classifier import ErrorClassifier
from eip1193.config import ProviderConfig
from eip1193.exceptions import (
    InvalidParamsError,
    InvalidRequestError,
    UnauthorizedError,
    UnsupportedMethodError,
)
from eip1193.logging import logger
from eip1193.utils.misc import is_named_mapping, is_positional_sequence

# Method name -> index of the account in positional params.
ACCOUNT_PARAM_INDEX: dict[str, int] = {
    "eth_sendTransaction": 0,
    "eth_signTransaction": 0,
    "eth_sign": 0,
    "personal_sign": 1,
    "eth_signTypedData": 1,
    "eth_signTypedData_v3": 0,
    "eth_signTypedData_v4": 0,
}
"""Methods that act on behalf of an account, which must be authorized."""

_ACCOUNT_KEYS = ("from", "address", "account")


class RequestDispatcher:
    """
    Validates requests, applies the provider's policy,
    and forwards them to the client exactly once.

    Args:
        client (:class:`~eip1193.api.ClientAPI`): Executes the methods.
        classifier (:class:`~eip1193.classifier.ErrorClassifier`): Classifies failures.
        config (:class:`~eip1193.config.ProviderConfig`): The request policy.
        is_authorized (Callable[[str], bool]): Checks whether an account is authorized.
    """

    def __init__(
        self,
        client: ClientAPI,
        classifier: Optional[ErrorClassifier] = None,
        config: Optional[ProviderConfig] = None,
        is_authorized: Optional[Callable[[str], bool]] = None,
    ):
        self.client = client
        self.classifier = classifier or ErrorClassifier()
        self.config = config or ProviderConfig()
        self._is_authorized = is_authorized or (lambda _: False)

    async def request(self, method: str, params: Optional[Params] = None) -> Any:
        """
        Execute the method through the client.

        Raises:
            :class:`~eip1193.exceptions.ProviderRpcError`: When the request is invalid,
              not allowed, or failed.

        Returns:
            Any: The method's result, unchanged.
        """
        self.validate(method, params)
        logger.debug(f"Requesting '{method}'.")
        try:
            result = await self.client.execute(method, params)
        except Exception as err:
            error = self.classifier.classify(err)
            logger.debug(f"Request '{method}' failed: ({error.code}) {error.message}")
            if error is err:
                raise

            raise error from err

        return result

    def validate(self, method: Any, params: Any):
        """
        Check the request before it reaches the client.

        Raises:
            :class:`~eip1193.exceptions.InvalidRequestError`: When the method is not
              a non-empty string.
            :class:`~eip1193.exceptions.InvalidParamsError`: When the params are neither
              a sequence nor a string-keyed mapping.
            :class:`~eip1193.exceptions.UnsupportedMethodError`: When the method is
              configured as unsupported.
            :class:`~eip1193.exceptions.UnauthorizedError`: When the method acts on behalf
              of an account that is not authorized.
        """
        if not isinstance(method, str) or not method.strip():
            raise InvalidRequestError(
                f"Method must be a non-empty string, got '{method!r}'.", data={"method": method}
            )

        elif params is not None and not (
            is_positional_sequence(params) or is_named_mapping(params)
        ):
            raise InvalidParamsError(
                "Params must be a sequence or a mapping with string keys, "
                f"got '{type(params).__name__}'.",
            )

        elif method in self.config.unsupported_methods:
            raise UnsupportedMethodError(f"Method '{method}' is not supported by this provider.")

        elif self.config.authorize_accounts and method in ACCOUNT_PARAM_INDEX:
            account = get_request_account(method, params)
            if account is None or not self._is_authorized(account):
                raise UnauthorizedError(data={"method": method, "account": account})


def get_request_account(method: str, params: Optional[Params]) -> Optional[str]:
    """
    The account an account-bearing request acts on behalf of, if it names one.
    """
    if params is None:
        return None

    elif isinstance(params, Mapping):
        return _find_account(params)

    index = ACCOUNT_PARAM_INDEX.get(method)
    if index is None or len(params) <= index:
        return None

    value = params[index]
    if isinstance(value, Mapping):
        return _find_account(value)

    return value if isinstance(value, str) else None


def _find_account(data: Mapping) -> Optional[str]:
    for key in _ACCOUNT_KEYS:
        if isinstance(value := data.get(key), str):
            return value

    return None
