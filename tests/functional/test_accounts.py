import pytest

from eip1193.accounts import AccountsWatcher


@pytest.fixture
def watcher(events):
    return AccountsWatcher(events)


def test_initial_accounts(watcher):
    assert watcher.accounts == []


def test_observe(watcher, recorder, owner):
    assert watcher.observe([owner]) is True
    assert watcher.accounts == [owner]
    assert recorder["accountsChanged"] == [([owner],)]


def test_observe_same_accounts_twice(watcher, recorder):
    watcher.observe(["0xA"])
    assert watcher.observe(["0xA"]) is False
    assert recorder.names == ["accountsChanged"]


def test_observe_tuple_same_as_list(watcher, recorder):
    watcher.observe(["0xA", "0xB"])
    watcher.observe(("0xA", "0xB"))
    assert recorder.names == ["accountsChanged"]


def test_observe_order_change(watcher, recorder, owner, other):
    watcher.observe([owner, other])
    watcher.observe([other, owner])
    assert recorder["accountsChanged"] == [([owner, other],), ([other, owner],)]


def test_observe_empty_after_accounts(watcher, recorder, owner):
    watcher.observe([owner])
    watcher.observe([])
    assert recorder["accountsChanged"][-1] == ([],)


def test_observe_empty_initially(watcher, recorder):
    # Nothing changed.
    assert watcher.observe([]) is False
    assert recorder.emitted == []


@pytest.mark.parametrize("accounts", ("0xA", None, [1, 2], {"0xA": 1}, b"0xA"))
def test_observe_invalid(watcher, recorder, accounts):
    with pytest.raises(TypeError):
        watcher.observe(accounts)

    assert recorder.emitted == []


def test_emitted_list_is_a_copy(watcher, events, owner):
    received = []
    events.on("accountsChanged", received.append)
    watcher.observe([owner])
    received[0].append("0xB")
    assert watcher.accounts == [owner]


def test_is_authorized(watcher, owner, other, not_authorized):
    watcher.observe([owner, other])
    assert watcher.is_authorized(owner)
    assert watcher.is_authorized(owner.lower())
    assert watcher.is_authorized(other.upper().replace("0X", "0x"))
    assert not watcher.is_authorized(not_authorized)


def test_is_authorized_no_accounts(watcher, owner):
    assert not watcher.is_authorized(owner)
