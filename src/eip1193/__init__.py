from eip1193.accounts import AccountsWatcher
from eip1193.api import ClientAPI, SignalSink
from eip1193.classifier import ErrorClassifier, classify
from eip1193.config import ProviderConfig
from eip1193.connection import Connected, ConnectionStateMachine, Disconnected
from eip1193.dispatcher import RequestDispatcher
from eip1193.events import EventBus, ProviderEvent
from eip1193.exceptions import (
    ProviderRpcError,
    UnauthorizedError,
    UnsupportedMethodError,
    UserRejectedRequestError,
)
from eip1193.provider import Provider
from eip1193.subscriptions import SubscriptionRouter
from eip1193.types import EthSubscriptionMessage, ProviderConnectInfo, ProviderMessage

__all__ = [
    "AccountsWatcher",
    "ClientAPI",
    "classify",
    "Connected",
    "ConnectionStateMachine",
    "Disconnected",
    "ErrorClassifier",
    "EthSubscriptionMessage",
    "EventBus",
    "Provider",
    "ProviderConfig",
    "ProviderConnectInfo",
    "ProviderEvent",
    "ProviderMessage",
    "ProviderRpcError",
    "RequestDispatcher",
    "SignalSink",
    "SubscriptionRouter",
    "UnauthorizedError",
    "UnsupportedMethodError",
    "UserRejectedRequestError",
]
