import pytest

from eip1193.connection import DISCONNECTED, Connected, ConnectionStateMachine, Disconnected


@pytest.fixture
def connection(events):
    return ConnectionStateMachine(events)


def test_initial_state(connection):
    assert connection.state == Disconnected()
    assert connection.state is DISCONNECTED
    assert not connection.is_connected
    assert connection.chain_id is None


def test_on_connect(connection, recorder):
    connection.on_connect("0x1")
    assert connection.state == Connected(chain_id="0x1")
    assert connection.is_connected
    assert recorder.names == ["connect"]
    assert recorder["connect"][0][0] == {"chainId": "0x1"}


@pytest.mark.parametrize("chain_id", (1, "0x1", "0x01", "0X1"))
def test_on_connect_normalizes_chain_id(connection, recorder, chain_id):
    connection.on_connect(chain_id)
    assert connection.chain_id == "0x1"
    assert recorder["connect"][0][0].chain_id == "0x1"


def test_on_connect_extra_info(connection, recorder):
    connection.on_connect("0x1", networkName="mainnet")
    info = recorder["connect"][0][0]
    assert info == {"chainId": "0x1", "networkName": "mainnet"}


def test_on_connect_invalid_chain_id(connection, recorder):
    with pytest.raises(ValueError):
        connection.on_connect("mainnet")

    assert not connection.is_connected
    assert recorder.emitted == []


def test_on_connect_when_connected_to_other_chain(connection, recorder):
    """
    Connecting again to a different chain is a chain change, never a second connect.
    """
    connection.on_connect("0x1")
    connection.on_connect("0x5")
    assert recorder.names == ["connect", "chainChanged"]
    assert recorder["chainChanged"] == [("0x5",)]
    assert connection.state == Connected(chain_id="0x5")


def test_on_connect_when_connected_to_same_chain(connection, recorder):
    connection.on_connect("0x1")
    connection.on_connect(1)
    assert recorder.names == ["connect"]


def test_on_chain_change(connection, recorder):
    connection.on_connect("0x1")
    connection.on_chain_change(5)
    assert recorder["chainChanged"] == [("0x5",)]
    assert connection.chain_id == "0x5"


def test_on_chain_change_same_chain(connection, recorder):
    connection.on_connect("0x1")
    connection.on_chain_change("0x1")
    assert recorder.names == ["connect"]


def test_on_chain_change_when_disconnected(connection, recorder):
    connection.on_chain_change("0x5")
    assert recorder.emitted == []
    assert connection.state is DISCONNECTED


def test_on_disconnect(connection, recorder):
    connection.on_connect("0x1")
    connection.on_disconnect(1006, "Connection lost.")
    assert recorder["close"] == [(1006, "Connection lost.")]
    assert connection.state is DISCONNECTED
    assert connection.chain_id is None


def test_on_disconnect_default_code(events, recorder):
    connection = ConnectionStateMachine(events, default_close_code=4900)
    connection.on_connect("0x1")
    connection.on_disconnect()
    assert recorder["close"] == [(4900, "")]


def test_on_disconnect_when_disconnected(connection, recorder):
    connection.on_disconnect(1000, "bye")
    assert recorder.emitted == []


def test_on_disconnect_twice(connection, recorder):
    connection.on_connect("0x1")
    connection.on_disconnect()
    connection.on_disconnect()
    assert recorder.names == ["connect", "close"]


@pytest.mark.parametrize("code,reason", [("1000", ""), (True, ""), (1000, None)])
def test_on_disconnect_invalid(connection, recorder, code, reason):
    connection.on_connect("0x1")
    with pytest.raises(TypeError):
        connection.on_disconnect(code, reason)

    assert connection.is_connected
    assert recorder.names == ["connect"]


def test_reconnect(connection, recorder):
    connection.on_connect("0x1")
    connection.on_disconnect()
    connection.on_connect("0x1")
    assert recorder.names == ["connect", "close", "connect"]
    assert connection.is_connected


def test_state_is_updated_before_listeners(connection, events):
    seen = []
    events.on("connect", lambda _: seen.append(connection.is_connected))
    events.on("chainChanged", lambda _: seen.append(connection.chain_id))
    events.on("close", lambda *_: seen.append(connection.is_connected))
    connection.on_connect("0x1")
    connection.on_chain_change("0x2")
    connection.on_disconnect()
    assert seen == [True, "0x2", False]


def test_str(connection):
    assert str(connection.state) == "disconnected"
    connection.on_connect("0x1")
    assert str(connection.state) == "connected (chain=0x1)"
