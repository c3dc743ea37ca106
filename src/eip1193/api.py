from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any, Optional, Protocol, Union

from eip1193.exceptions import EIP1193Exception
from eip1193.types import ChainIdLike

Params = Union[Sequence[Any], dict[str, Any]]


class SignalSink(Protocol):
    """
    What a client pushes its signals into (implemented by the provider).
    """

    def on_connect(self, chain_id: ChainIdLike, **extra: Any): ...

    def on_chain_change(self, chain_id: ChainIdLike): ...

    def on_disconnect(self, code: Optional[int] = None, reason: str = ""): ...

    def on_accounts_result(self, accounts: Sequence[str]): ...

    def on_notification(self, raw: Any): ...


class ClientAPI(ABC):
    """
    An abstract class representing the client that executes RPC methods
    on behalf of the provider and signals connectivity, account and
    subscription changes back to it.
    """

    name: str = "client"

    def __init__(self):
        self._sink: Optional[SignalSink] = None

    def __repr__(self) -> str:
        return f"<{type(self).__name__}>"

    @property
    def sink(self) -> Optional[SignalSink]:
        """
        Where signals go. ``None`` until attached to a provider.
        """
        return self._sink

    def attach(self, sink: SignalSink):
        """
        Attach the client to the provider it signals.
        A client can only signal one provider.

        Args:
            sink (:class:`~eip1193.api.SignalSink`): Usually the provider.
        """
        if self._sink is not None and self._sink is not sink:
            raise EIP1193Exception(f"Client '{self.name}' is already attached to a provider.")

        self._sink = sink

    @abstractmethod
    async def execute(self, method: str, params: Optional[Params] = None) -> Any:
        """
        Execute an RPC method.

        Args:
            method (str): The RPC method name, e.g. ``"eth_chainId"``.
            params (Optional[Union[Sequence, dict]]): The method parameters, verbatim.

        Raises:
            Exception: Any error the method or the transport produced.
              The provider classifies it.

        Returns:
            Any: The method's result, as defined by the method.
        """

    async def connect(self):
        """
        Connect to the remote side. Does nothing by default.
        """

    async def disconnect(self):
        """
        Disconnect from the remote side. Does nothing by default.
        """

    def signal_connect(self, chain_id: ChainIdLike, **extra: Any):
        if self._sink is not None:
            self._sink.on_connect(chain_id, **extra)

    def signal_chain_change(self, chain_id: ChainIdLike):
        if self._sink is not None:
            self._sink.on_chain_change(chain_id)

    def signal_disconnect(self, code: Optional[int] = None, reason: str = ""):
        if self._sink is not None:
            self._sink.on_disconnect(code, reason)

    def signal_accounts(self, accounts: Sequence[str]):
        if self._sink is not None:
            self._sink.on_accounts_result(accounts)

    def signal_notification(self, raw: Any):
        if self._sink is not None:
            self._sink.on_notification(raw)
