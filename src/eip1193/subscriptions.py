from collections.abc import Mapping
from typing import Any

from eip1193.events import EventBus, ProviderEvent
from eip1193.types import (
    ETH_SUBSCRIPTION,
    EthSubscriptionData,
    EthSubscriptionMessage,
    ProviderMessage,
)

DEFAULT_MESSAGE_TYPE = "message"
"""The ``type`` given to notifications that do not say what they are."""


class SubscriptionRouter:
    """
    Turns client notifications into ``message`` events.
    Every notification routed emits exactly one ``message``.
    """

    def __init__(self, events: EventBus):
        self._events = events

    def route(self, raw: Any) -> ProviderMessage:
        """
        Emit the notification as a ``message``.

        Accepted shapes:

        * ``{"subscription": ..., "result": ...}``: a subscription notification.
        * ``{"method": "eth_subscription", "params": {"subscription": ..., "result": ...}}``:
          a JSON-RPC subscription notification.
        * ``{"method": ..., "params": ...}``: any other JSON-RPC notification.
        * ``{"type": ..., "data": ...}``: a notification of the given type.
        * A :class:`~eip1193.types.ProviderMessage`, emitted as-is.

        Anything else is emitted with type ``"message"`` and the raw value as the data.

        Returns:
            :class:`~eip1193.types.ProviderMessage`: The emitted message.
        """
        message = to_provider_message(raw)
        self._events.emit(ProviderEvent.MESSAGE, message)
        return message


def to_provider_message(raw: Any) -> ProviderMessage:
    if isinstance(raw, ProviderMessage):
        return raw

    elif not isinstance(raw, Mapping):
        return ProviderMessage(type=DEFAULT_MESSAGE_TYPE, data=raw)

    elif _is_subscription_payload(raw):
        return _to_subscription_message(raw)

    elif isinstance(method := raw.get("method"), str) and method:
        params = raw.get("params")
        if method == ETH_SUBSCRIPTION and _is_subscription_payload(params):
            return _to_subscription_message(params)

        return ProviderMessage(type=method, data=params)

    elif isinstance(message_type := raw.get("type"), str) and message_type:
        data = raw.get("data")
        if message_type == ETH_SUBSCRIPTION and _is_subscription_payload(data):
            return _to_subscription_message(data)

        return ProviderMessage(type=message_type, data=data)

    return ProviderMessage(type=DEFAULT_MESSAGE_TYPE, data=dict(raw))


def _is_subscription_payload(value: Any) -> bool:
    return (
        isinstance(value, Mapping)
        and isinstance(value.get("subscription"), str)
        and "result" in value
    )


def _to_subscription_message(payload: Mapping) -> EthSubscriptionMessage:
    data = EthSubscriptionData(subscription=payload["subscription"], result=payload["result"])
    return EthSubscriptionMessage(data=data)
