import inspect
from collections.abc import Callable, Mapping, Sequence
from itertools import count
from typing import Any, Optional, Union

from eth_utils import to_hex

from eip1193.api import ClientAPI, Params
from eip1193.config import NORMAL_CLOSURE
from eip1193.exceptions import METHOD_NOT_FOUND, ClientError
from eip1193.logging import logger
from eip1193.types import ETH_SUBSCRIPTION, ChainIdLike, chain_id_to_int
from eip1193_test.config import LocalClientConfig

Handler = Callable[[Optional[Params]], Any]
RawError = Union[Exception, Mapping]


class LocalClient(ClientAPI):
    """
    An in-memory client for tests and examples.
    It answers a handful of methods itself and lets tests register handlers,
    preset results or errors, and push any signal on demand.
    Every executed call is recorded in :attr:`calls`.
    """

    name = "local"

    def __init__(self, config: Optional[LocalClientConfig] = None):
        super().__init__()
        self.config = config or LocalClientConfig()
        self.chain_id: int = self.config.chain_id
        self.accounts: list[str] = list(self.config.accounts)
        self.calls: list[tuple[str, Optional[Params]]] = []
        self.connected = False
        self._handlers: dict[str, Handler] = {
            "eth_chainId": lambda _: to_hex(self.chain_id),
            "net_version": lambda _: str(self.chain_id),
            "eth_accounts": self._get_accounts,
            "eth_requestAccounts": self._get_accounts,
            "eth_subscribe": self._subscribe,
            "eth_unsubscribe": self._unsubscribe,
        }
        self._results: dict[str, Any] = {}
        self._errors: dict[str, RawError] = {}
        self._subscriptions: set[str] = set()
        self._subscription_ids = count(1)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} chain_id={self.chain_id}>"

    async def connect(self):
        self.connected = True
        self.signal_connect(self.chain_id)

    async def disconnect(self):
        self.connected = False
        self.signal_disconnect(NORMAL_CLOSURE, "Client disconnected.")

    async def execute(self, method: str, params: Optional[Params] = None) -> Any:
        self.calls.append((method, params))
        if method in self._errors:
            raise _to_exception(self._errors[method])

        elif method in self._results:
            return self._results[method]

        elif handler := self._handlers.get(method):
            result = handler(params)
            if inspect.isawaitable(result):
                result = await result

            return result

        message = f"the method {method} does not exist/is not available"
        raise ClientError(message, error={"code": METHOD_NOT_FOUND, "message": message})

    # Test helpers

    def add_handler(self, method: str, handler: Handler):
        """
        Answer ``method`` with ``handler(params)``. The handler may be async.
        """
        self._handlers[method] = handler

    def set_result(self, method: str, result: Any):
        self._errors.pop(method, None)
        self._results[method] = result

    def set_error(self, method: str, error: RawError):
        """
        Fail ``method`` with the given error: an exception to raise,
        or a JSON-RPC error object (``{"code": ..., "message": ...}``).
        """
        self._results.pop(method, None)
        self._errors[method] = error

    def clear(self, method: Optional[str] = None):
        """
        Remove preset results and errors, of one method or all of them.
        """
        if method is None:
            self._results.clear()
            self._errors.clear()
        else:
            self._results.pop(method, None)
            self._errors.pop(method, None)

    def switch_chain(self, chain_id: ChainIdLike):
        self.chain_id = chain_id_to_int(chain_id)
        if self.connected:
            self.signal_chain_change(self.chain_id)

    def set_accounts(self, accounts: Sequence[str]):
        """
        Change the authorized accounts and signal them, as a wallet does
        when the user connects or switches accounts.
        """
        self.accounts = list(accounts)
        self.signal_accounts(self.accounts)

    def drop_connection(self, code: int = 1006, reason: str = "Connection lost."):
        self.connected = False
        self.signal_disconnect(code, reason)

    def push_notification(self, raw: Any):
        self.signal_notification(raw)

    def push_subscription(self, subscription: str, result: Any):
        if subscription not in self._subscriptions:
            logger.warning(f"Pushing to unknown subscription '{subscription}'.")

        self.signal_notification(
            {
                "jsonrpc": "2.0",
                "method": ETH_SUBSCRIPTION,
                "params": {"subscription": subscription, "result": result},
            }
        )

    def _get_accounts(self, _) -> list[str]:
        accounts = list(self.accounts)
        self.signal_accounts(accounts)
        return accounts

    def _subscribe(self, _) -> str:
        subscription = to_hex(next(self._subscription_ids))
        self._subscriptions.add(subscription)
        return subscription

    def _unsubscribe(self, params) -> bool:
        if not params or params[0] not in self._subscriptions:
            return False

        self._subscriptions.remove(params[0])
        return True


def _to_exception(error: RawError) -> Exception:
    if isinstance(error, Exception):
        return error

    message = error.get("message") if isinstance(error.get("message"), str) else "Request failed."
    return ClientError(message, error=error)
