from collections import defaultdict
from typing import Any

import pytest

from eip1193.config import ProviderConfig
from eip1193.events import EventBus, ProviderEvent
from eip1193.logging import LogLevel, logger
from eip1193.provider import Provider
from eip1193_test import DEFAULT_TEST_ACCOUNTS, LocalClient

OWNER = DEFAULT_TEST_ACCOUNTS[0]
OTHER = DEFAULT_TEST_ACCOUNTS[1]
NOT_AUTHORIZED = "0xd8dA6BF26964aF9D7eEd9e03E53415D37aA96045"


class EventRecorder:
    """
    Records every emission of every event, in order.
    """

    def __init__(self, events: EventBus):
        self.emitted: list[tuple[str, tuple]] = []
        self.by_event: dict[str, list[tuple]] = defaultdict(list)
        for event in ProviderEvent:
            events.on(event, self._make_listener(event.value))

    def _make_listener(self, name: str):
        def listener(*values: Any):
            self.emitted.append((name, values))
            self.by_event[name].append(values)

        return listener

    def __getitem__(self, name: str) -> list[tuple]:
        return self.by_event[name]

    @property
    def names(self) -> list[str]:
        return [name for name, _ in self.emitted]

    def clear(self):
        self.emitted.clear()
        self.by_event.clear()


@pytest.fixture(autouse=True)
def setenviron(monkeypatch):
    """
    Ensure the environment never configures the tests.
    """
    for key in ("EIP1193_AUTHORIZE_ACCOUNTS", "EIP1193_UNSUPPORTED_METHODS", "EIP1193_LOG_LEVEL"):
        monkeypatch.delenv(key, raising=False)


@pytest.fixture(autouse=True)
def reset_log_level():
    yield
    logger.set_level(LogLevel.INFO)


@pytest.fixture
def events():
    return EventBus()


@pytest.fixture
def recorder(events):
    return EventRecorder(events)


@pytest.fixture
def config():
    return ProviderConfig()


@pytest.fixture
def client():
    return LocalClient()


@pytest.fixture
def provider(client, config):
    return Provider(client, config=config)


@pytest.fixture
def provider_events(provider):
    return EventRecorder(provider.events)


@pytest.fixture
def owner():
    return OWNER


@pytest.fixture
def other():
    return OTHER


@pytest.fixture
def not_authorized():
    return NOT_AUTHORIZED


@pytest.fixture
def make_recorder():
    return EventRecorder
