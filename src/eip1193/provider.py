from collections.abc import Callable, Mapping, Sequence
from typing import Any, Optional

from eip1193.accounts import AccountsWatcher
from eip1193.api import ClientAPI, Params
from eip1193.classifier import ErrorClassifier
from eip1193.config import ProviderConfig
from eip1193.connection import ConnectionStateMachine
from eip1193.dispatcher import RequestDispatcher
from eip1193.events import EventBus, EventName, Listener
from eip1193.exceptions import InvalidRequestError, ProviderRpcError
from eip1193.logging import logger
from eip1193.subscriptions import SubscriptionRouter
from eip1193.types import ChainIdLike, ProviderMessage
from eip1193.utils.misc import log_instead_of_fail

LegacyCallback = Callable[[Optional[ProviderRpcError], Optional[dict]], Any]


class Provider:
    """
    An EIP-1193 Ethereum provider.

    Send requests with :meth:`request` and listen to the
    ``connect``, ``close``, ``chainChanged``, ``accountsChanged`` and ``message``
    events with :meth:`on`. The provider's state only changes when the client
    signals it; requests never change it.

    Usage example::

        provider = Provider(HTTPClient(uri="http://127.0.0.1:8545"))
        provider.on("chainChanged", lambda chain_id: print(chain_id))
        await provider.connect()
        block_number = await provider.request("eth_blockNumber")

    Args:
        client (:class:`~eip1193.api.ClientAPI`): Executes the requests.
        config (Optional[:class:`~eip1193.config.ProviderConfig`]): The request policy.
          Defaults to loading from the environment.
    """

    def __init__(
        self,
        client: ClientAPI,
        config: Optional[ProviderConfig] = None,
        classifier: Optional[ErrorClassifier] = None,
    ):
        self.config = config or ProviderConfig()
        if "log_level" in self.config.model_fields_set:
            logger.set_level(self.config.log_level)

        self.client = client
        self.events = EventBus()
        self.connection = ConnectionStateMachine(
            self.events, default_close_code=self.config.default_close_code
        )
        self.accounts = AccountsWatcher(self.events)
        self.router = SubscriptionRouter(self.events)
        self.dispatcher = RequestDispatcher(
            client,
            classifier=classifier,
            config=self.config,
            is_authorized=self.accounts.is_authorized,
        )
        client.attach(self)

    @log_instead_of_fail(default="<Provider>")
    def __repr__(self) -> str:
        return f"<{type(self).__name__} client={self.client!r} {self.connection.state}>"

    async def request(self, method: str, params: Optional[Params] = None) -> Any:
        """
        Make an RPC request.

        Args:
            method (str): The RPC method, e.g. ``"eth_accounts"``.
            params (Optional[Union[Sequence, dict]]): Positional or named parameters.

        Raises:
            :class:`~eip1193.exceptions.ProviderRpcError`: When the request fails.

        Returns:
            Any: The result, as defined by the method.
        """
        return await self.dispatcher.request(method, params)

    def is_connected(self) -> bool:
        return self.connection.is_connected

    async def connect(self):
        """
        Ask the client to connect. The ``connect`` event follows the client's signal.

        Raises:
            :class:`~eip1193.exceptions.ProviderRpcError`: When the client fails to connect.
        """
        try:
            await self.client.connect()
        except Exception as err:
            raise _classified(self.dispatcher.classifier.classify(err), err)

    async def disconnect(self):
        """
        Ask the client to disconnect. The ``close`` event follows the client's signal.
        """
        try:
            await self.client.disconnect()
        except Exception as err:
            raise _classified(self.dispatcher.classifier.classify(err), err)

    # Events

    def on(self, event: EventName, listener: Listener) -> "Provider":
        self.events.on(event, listener)
        return self

    add_listener = on

    def once(self, event: EventName, listener: Listener) -> "Provider":
        self.events.once(event, listener)
        return self

    def remove_listener(self, event: EventName, listener: Listener) -> "Provider":
        self.events.remove_listener(event, listener)
        return self

    def remove_all_listeners(self, event: Optional[EventName] = None) -> "Provider":
        self.events.remove_all_listeners(event)
        return self

    def listeners(self, event: EventName) -> list[Listener]:
        return self.events.listeners(event)

    def listener_count(self, event: EventName) -> int:
        return self.events.listener_count(event)

    # Client signals

    def on_connect(self, chain_id: ChainIdLike, **extra: Any):
        self.connection.on_connect(chain_id, **extra)

    def on_chain_change(self, chain_id: ChainIdLike):
        self.connection.on_chain_change(chain_id)

    def on_disconnect(self, code: Optional[int] = None, reason: str = ""):
        self.connection.on_disconnect(code, reason)

    def on_accounts_result(self, accounts: Sequence[str]):
        self.accounts.observe(accounts)

    def on_notification(self, raw: Any) -> ProviderMessage:
        return self.router.route(raw)

    # Legacy

    async def send(self, method: str, params: Optional[Params] = None) -> Any:
        """
        Deprecated: use :meth:`request`.
        """
        return await self.request(method, params)

    async def send_async(self, payload: Mapping, callback: LegacyCallback):
        """
        Deprecated: use :meth:`request`.
        Execute a JSON-RPC request object and call ``callback(error, response)``
        with a JSON-RPC response object.

        Args:
            payload (Mapping): A JSON-RPC request, e.g.
              ``{"jsonrpc": "2.0", "id": 1, "method": "eth_chainId"}``.
            callback (Callable): Called with ``(None, response)`` on success or
              ``(error, response)`` on failure.
        """
        request_id = payload.get("id") if isinstance(payload, Mapping) else None
        response: dict[str, Any] = {"jsonrpc": "2.0", "id": request_id}
        try:
            if not isinstance(payload, Mapping):
                raise InvalidRequestError("Payload must be a JSON-RPC request object.")

            result = await self.request(payload.get("method"), payload.get("params"))
        except ProviderRpcError as err:
            response["error"] = err.to_dict()
            _call_legacy_callback(callback, err, response)
        else:
            response["result"] = result
            _call_legacy_callback(callback, None, response)


def _call_legacy_callback(callback: LegacyCallback, error, response: dict):
    try:
        callback(error, response)
    except Exception as err:
        logger.error_from_exception(err, "Legacy callback failed.")


def _classified(error: ProviderRpcError, cause: Exception) -> ProviderRpcError:
    if error is not cause:
        error.__cause__ = cause

    return error
