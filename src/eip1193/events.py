from collections.abc import Callable
from enum import Enum
from typing import Any, Optional, Union

from eip1193.logging import logger

Listener = Callable[..., Any]


class ProviderEvent(str, Enum):
    """
    The events a provider emits.
    """

    CONNECT = "connect"
    """Emitted with a ``ProviderConnectInfo`` when connecting to a chain."""

    CLOSE = "close"
    """Emitted with ``(code, reason)`` when disconnected from all chains."""

    CHAIN_CHANGED = "chainChanged"
    """Emitted with the new chain ID when the connected chain changes."""

    ACCOUNTS_CHANGED = "accountsChanged"
    """Emitted with the new list of accounts when the authorized accounts change."""

    MESSAGE = "message"
    """Emitted with a ``ProviderMessage`` for each client notification."""

    def __str__(self) -> str:
        return self.value

    @property
    def arity(self) -> int:
        """
        The number of values emitted with this event.
        """
        return 2 if self is ProviderEvent.CLOSE else 1


EventName = Union[ProviderEvent, str]


def to_event(event: EventName) -> ProviderEvent:
    """
    Get the :class:`~eip1193.events.ProviderEvent` for the given name.

    Raises:
        ValueError: When not one of the provider's events.
    """
    if isinstance(event, ProviderEvent):
        return event

    try:
        return ProviderEvent(event)
    except ValueError as err:
        options = ", ".join(e.value for e in ProviderEvent)
        raise ValueError(f"Unknown event '{event}'. Expecting one of: {options}.") from err


class _Registration:
    # Wraps a listener so `once` registrations can be told apart
    # while removal still works by the listener's identity.

    __slots__ = ("listener", "once")

    def __init__(self, listener: Listener, once: bool = False):
        self.listener = listener
        self.once = once


class EventBus:
    """
    Synchronous publish/subscribe for the provider's events.

    Listeners are called in the order they were registered.
    Registering the same listener twice means it is called twice per emission.
    A listener raising an error does not affect other listeners or the emitter;
    the error is logged instead.
    """

    def __init__(self):
        self._registrations: dict[ProviderEvent, list[_Registration]] = {
            event: [] for event in ProviderEvent
        }

    def __repr__(self) -> str:
        counts = ", ".join(f"{e.value}={len(regs)}" for e, regs in self._registrations.items())
        return f"<{type(self).__name__} {counts}>"

    def on(self, event: EventName, listener: Listener) -> "EventBus":
        """
        Register a listener for an event.

        Args:
            event (Union[ProviderEvent, str]): The event, e.g. ``"connect"``.
            listener (Callable): Called with the event's values.

        Returns:
            :class:`~eip1193.events.EventBus`: This bus, for chaining.
        """
        self._add(event, listener, once=False)
        return self

    add_listener = on

    def once(self, event: EventName, listener: Listener) -> "EventBus":
        """
        Register a listener that is removed right before it is first called.
        """
        self._add(event, listener, once=True)
        return self

    def remove_listener(self, event: EventName, listener: Listener) -> "EventBus":
        """
        Remove the first registration of the given listener.
        Removing a listener that is not registered does nothing.
        """
        registrations = self._registrations[to_event(event)]
        for index, registration in enumerate(registrations):
            if registration.listener is listener:
                del registrations[index]
                break

        return self

    off = remove_listener

    def remove_all_listeners(self, event: Optional[EventName] = None) -> "EventBus":
        """
        Remove all listeners of the given event, or of every event when not given.
        """
        events = list(ProviderEvent) if event is None else [to_event(event)]
        for evt in events:
            self._registrations[evt] = []

        return self

    def listeners(self, event: EventName) -> list[Listener]:
        return [r.listener for r in self._registrations[to_event(event)]]

    def listener_count(self, event: EventName) -> int:
        return len(self._registrations[to_event(event)])

    def emit(self, event: EventName, *values: Any) -> bool:
        """
        Call every listener registered for the event, in registration order.
        Listeners added or removed by a listener during the emission
        do not change which listeners this emission calls.

        Args:
            event (Union[ProviderEvent, str]): The event to emit.
            *values: The event's values.

        Raises:
            TypeError: When given the wrong number of values for the event.

        Returns:
            bool: ``True`` when there were listeners.
        """
        evt = to_event(event)
        if len(values) != evt.arity:
            raise TypeError(
                f"Event '{evt.value}' takes {evt.arity} value(s) but {len(values)} were given."
            )

        snapshot = list(self._registrations[evt])
        for registration in snapshot:
            if registration.once:
                self._discard(evt, registration)

            try:
                registration.listener(*values)
            except Exception as err:
                logger.error_from_exception(err, f"Listener for '{evt.value}' failed.")

        return bool(snapshot)

    def _add(self, event: EventName, listener: Listener, once: bool):
        if not callable(listener):
            raise TypeError(f"Listener must be callable, got '{type(listener).__name__}'.")

        self._registrations[to_event(event)].append(_Registration(listener, once=once))

    def _discard(self, event: ProviderEvent, registration: _Registration):
        registrations = self._registrations[event]
        for index, existing in enumerate(registrations):
            if existing is registration:
                del registrations[index]
                break
