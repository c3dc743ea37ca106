from dataclasses import dataclass
from typing import Any, Optional, Union

from eth_typing import HexStr

from eip1193.config import NORMAL_CLOSURE
from eip1193.events import EventBus, ProviderEvent
from eip1193.exceptions import is_error_code
from eip1193.logging import logger
from eip1193.types import ChainIdLike, ProviderConnectInfo, to_chain_id


@dataclass(frozen=True)
class Disconnected:
    """
    Not connected to any chain. The initial state.
    """

    def __str__(self) -> str:
        return "disconnected"


@dataclass(frozen=True)
class Connected:
    """
    Connected to the chain with the given ID.
    """

    chain_id: HexStr

    def __str__(self) -> str:
        return f"connected (chain={self.chain_id})"


ConnectionState = Union[Disconnected, Connected]

DISCONNECTED = Disconnected()


class ConnectionStateMachine:
    """
    Tracks whether the client is connected and to which chain,
    emitting ``connect``, ``chainChanged`` and ``close`` on transitions.

    Only the client's signals move the machine::

        Disconnected --on_connect--> Connected(chain)        emits connect
        Connected(a) --on_connect / on_chain_change(b)--> Connected(b)  emits chainChanged
        Connected(_) --on_disconnect--> Disconnected          emits close
    """

    def __init__(self, events: EventBus, default_close_code: int = NORMAL_CLOSURE):
        self._events = events
        self._state: ConnectionState = DISCONNECTED
        self.default_close_code = default_close_code

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self._state}>"

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def is_connected(self) -> bool:
        return isinstance(self._state, Connected)

    @property
    def chain_id(self) -> Optional[HexStr]:
        """
        The connected chain's ID, or ``None`` when disconnected.
        """
        return self._state.chain_id if isinstance(self._state, Connected) else None

    def on_connect(self, chain_id: ChainIdLike, **extra: Any):
        """
        Handle the client connecting to a chain.
        When already connected to a different chain, it is handled as a chain change.

        Args:
            chain_id (Union[int, str]): The chain connected to.
            **extra: Additional ``ProviderConnectInfo`` fields.
        """
        new_chain_id = to_chain_id(chain_id)
        if isinstance(self._state, Connected):
            self._change_chain(new_chain_id)
            return

        info = ProviderConnectInfo(chainId=new_chain_id, **extra)
        self._state = Connected(chain_id=new_chain_id)
        logger.info(f"Connected to chain '{new_chain_id}'.")
        self._events.emit(ProviderEvent.CONNECT, info)

    def on_chain_change(self, chain_id: ChainIdLike):
        """
        Handle the client switching chains.
        Ignored while disconnected.
        """
        new_chain_id = to_chain_id(chain_id)
        if not isinstance(self._state, Connected):
            logger.debug(f"Ignoring chain change to '{new_chain_id}' while disconnected.")
            return

        self._change_chain(new_chain_id)

    def on_disconnect(self, code: Optional[int] = None, reason: str = ""):
        """
        Handle the client losing connection to all chains.
        Ignored while already disconnected.

        Args:
            code (Optional[int]): The close code. Defaults to ``default_close_code``.
            reason (str): Why the connection closed.
        """
        code = self.default_close_code if code is None else code
        if not is_error_code(code):
            raise TypeError(f"Close code must be an integer, got '{code!r}'.")
        elif not isinstance(reason, str):
            raise TypeError(f"Close reason must be a string, got '{type(reason).__name__}'.")

        if not isinstance(self._state, Connected):
            logger.debug("Ignoring disconnect while already disconnected.")
            return

        self._state = DISCONNECTED
        message = f"Disconnected (code={code})"
        logger.info(f"{message}: {reason}" if reason else f"{message}.")
        self._events.emit(ProviderEvent.CLOSE, code, reason)

    def _change_chain(self, chain_id: HexStr):
        if self._state == Connected(chain_id=chain_id):
            return

        self._state = Connected(chain_id=chain_id)
        logger.info(f"Chain changed to '{chain_id}'.")
        self._events.emit(ProviderEvent.CHAIN_CHANGED, chain_id)
