from collections.abc import Sequence

from eip1193.events import EventBus, ProviderEvent
from eip1193.logging import logger
from eip1193.utils.misc import is_positional_sequence


class AccountsWatcher:
    """
    Tracks the accounts the client last reported as authorized
    and emits ``accountsChanged`` when they change.
    """

    def __init__(self, events: EventBus):
        self._events = events
        self._snapshot: tuple[str, ...] = ()

    def __repr__(self) -> str:
        return f"<{type(self).__name__} accounts={list(self._snapshot)}>"

    @property
    def accounts(self) -> list[str]:
        return list(self._snapshot)

    def is_authorized(self, address: str) -> bool:
        """
        ``True`` when the address is one of the last reported accounts.
        Addresses are compared case-insensitively (checksums do not matter).
        """
        address = address.lower()
        return any(account.lower() == address for account in self._snapshot)

    def observe(self, accounts: Sequence[str]) -> bool:
        """
        Observe the result of an accounts query.
        Emits ``accountsChanged`` only when the accounts (or their order) differ
        from the last observation.

        Args:
            accounts (Sequence[str]): The account addresses, in the client's order.

        Raises:
            TypeError: When not given a sequence of strings.

        Returns:
            bool: ``True`` when the accounts changed.
        """
        if not is_positional_sequence(accounts) or not all(isinstance(a, str) for a in accounts):
            raise TypeError("Accounts must be a sequence of address strings.")

        new_snapshot = tuple(accounts)
        if new_snapshot == self._snapshot:
            return False

        self._snapshot = new_snapshot
        logger.debug(f"Accounts changed: {list(new_snapshot)}")
        self._events.emit(ProviderEvent.ACCOUNTS_CHANGED, list(new_snapshot))
        return True
