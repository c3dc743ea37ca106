import pytest

from eip1193.events import EventBus, ProviderEvent, to_event
from eip1193.logging import LogLevel, logger


@pytest.fixture
def calls():
    return []


@pytest.fixture
def listener(calls):
    def fn(*values):
        calls.append(values)

    return fn


class TestProviderEvent:
    @pytest.mark.parametrize(
        "name,expected",
        [
            ("connect", ProviderEvent.CONNECT),
            ("close", ProviderEvent.CLOSE),
            ("chainChanged", ProviderEvent.CHAIN_CHANGED),
            ("accountsChanged", ProviderEvent.ACCOUNTS_CHANGED),
            ("message", ProviderEvent.MESSAGE),
            (ProviderEvent.MESSAGE, ProviderEvent.MESSAGE),
        ],
    )
    def test_to_event(self, name, expected):
        assert to_event(name) is expected

    @pytest.mark.parametrize("name", ("disconnect", "chainchanged", "", "networkChanged"))
    def test_to_event_unknown(self, name):
        with pytest.raises(ValueError, match="Unknown event"):
            to_event(name)

    def test_arity(self):
        assert ProviderEvent.CLOSE.arity == 2
        assert all(e.arity == 1 for e in ProviderEvent if e is not ProviderEvent.CLOSE)

    def test_str(self):
        assert str(ProviderEvent.CHAIN_CHANGED) == "chainChanged"


class TestEventBus:
    def test_emit(self, events, listener, calls):
        events.on("message", listener)
        assert events.emit("message", "hello") is True
        assert calls == [("hello",)]

    def test_emit_no_listeners(self, events):
        assert events.emit("message", "hello") is False

    def test_emit_only_calls_listeners_of_event(self, events, listener, calls):
        events.on("connect", listener)
        events.emit("message", "hello")
        assert calls == []

    def test_same_listener_twice(self, events, calls):
        """
        A listener registered twice is called twice,
        and removing one registration leaves the other.
        """

        def listener(value):
            calls.append(value)

        events.on("message", listener)
        events.on("message", listener)
        events.emit("message", "a")
        assert calls == ["a", "a"]

        events.remove_listener("message", listener)
        events.emit("message", "b")
        assert calls == ["a", "a", "b"]
        assert events.listener_count("message") == 1

    def test_registration_order(self, events, calls):
        events.on("message", lambda _: calls.append(1))
        events.on("message", lambda _: calls.append(2))
        events.on("message", lambda _: calls.append(3))
        events.emit("message", None)
        assert calls == [1, 2, 3]

    def test_remove_listener_first_match(self, events, calls):
        def first(_):
            calls.append("first")

        def second(_):
            calls.append("second")

        events.on("message", first)
        events.on("message", second)
        events.on("message", first)
        events.remove_listener("message", first)
        assert events.listeners("message") == [second, first]

    def test_remove_listener_not_registered(self, events, listener):
        # Does not fail.
        events.remove_listener("message", listener)
        assert events.listener_count("message") == 0

    def test_remove_listener_by_identity(self, events, calls):
        class Listener:
            def __eq__(self, other):
                return True

            def __call__(self, value):
                calls.append(value)

        registered = Listener()
        events.on("message", registered)
        events.remove_listener("message", Listener())
        assert events.listener_count("message") == 1

    def test_emit_snapshot_when_adding(self, events, calls):
        def late(value):
            calls.append(("late", value))

        def adder(value):
            calls.append(("adder", value))
            events.on("message", late)

        events.on("message", adder)
        events.emit("message", 1)
        assert calls == [("adder", 1)]

        events.emit("message", 2)
        assert ("late", 2) in calls

    def test_emit_snapshot_when_removing(self, events, calls):
        def second(value):
            calls.append(("second", value))

        def remover(value):
            calls.append(("remover", value))
            events.remove_listener("message", second)

        events.on("message", remover)
        events.on("message", second)
        events.emit("message", 1)
        assert calls == [("remover", 1), ("second", 1)]

        calls.clear()
        events.emit("message", 2)
        assert calls == [("remover", 2)]

    def test_failing_listener_is_isolated(self, events, calls, caplog):
        def bad(_):
            raise ValueError("listener broke")

        events.on("message", bad)
        events.on("message", lambda value: calls.append(value))
        with logger.at_level(LogLevel.ERROR):
            assert events.emit("message", "still delivered") is True

        assert calls == ["still delivered"]
        assert "listener broke" in caplog.text

    def test_emit_wrong_arity(self, events):
        with pytest.raises(TypeError, match="takes 2 value"):
            events.emit("close", 1000)

        with pytest.raises(TypeError, match="takes 1 value"):
            events.emit("chainChanged", "0x1", "0x2")

    def test_emit_unknown_event(self, events):
        with pytest.raises(ValueError):
            events.emit("disconnect", 1000)

    def test_on_not_callable(self, events):
        with pytest.raises(TypeError, match="callable"):
            events.on("message", "not a function")

    def test_once(self, events, listener, calls):
        events.once("chainChanged", listener)
        events.emit("chainChanged", "0x1")
        events.emit("chainChanged", "0x2")
        assert calls == [("0x1",)]
        assert events.listener_count("chainChanged") == 0

    def test_once_removed_with_remove_listener(self, events, listener, calls):
        events.once("chainChanged", listener)
        events.remove_listener("chainChanged", listener)
        events.emit("chainChanged", "0x1")
        assert calls == []

    def test_remove_all_listeners(self, events, listener):
        events.on("message", listener).on("connect", listener)
        events.remove_all_listeners("message")
        assert events.listener_count("message") == 0
        assert events.listener_count("connect") == 1

        events.remove_all_listeners()
        assert events.listener_count("connect") == 0

    def test_enum_and_string_names_are_the_same_event(self, events, listener, calls):
        events.on(ProviderEvent.ACCOUNTS_CHANGED, listener)
        events.emit("accountsChanged", ["0xA"])
        events.remove_listener("accountsChanged", listener)
        events.emit(ProviderEvent.ACCOUNTS_CHANGED, ["0xB"])
        assert calls == [(["0xA"],)]

    def test_repr(self):
        bus = EventBus()
        bus.on("message", print)
        assert "message=1" in repr(bus)
