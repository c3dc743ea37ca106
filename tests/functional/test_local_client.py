import pytest

from eip1193.exceptions import ClientError, EIP1193Exception
from eip1193_test import DEFAULT_TEST_ACCOUNTS, LocalClient, LocalClientConfig


class Sink:
    def __init__(self):
        self.signals = []

    def on_connect(self, chain_id, **extra):
        self.signals.append(("connect", chain_id))

    def on_chain_change(self, chain_id):
        self.signals.append(("chain_change", chain_id))

    def on_disconnect(self, code=None, reason=""):
        self.signals.append(("disconnect", code, reason))

    def on_accounts_result(self, accounts):
        self.signals.append(("accounts", accounts))

    def on_notification(self, raw):
        self.signals.append(("notification", raw))


@pytest.fixture
def sink(client):
    sink = Sink()
    client.attach(sink)
    return sink


def test_config():
    client = LocalClient(config=LocalClientConfig(chain_id=5, accounts=[DEFAULT_TEST_ACCOUNTS[2]]))
    assert client.chain_id == 5
    assert client.accounts == [DEFAULT_TEST_ACCOUNTS[2]]


def test_signals_without_sink(client):
    # Nothing to signal.
    client.switch_chain(5)
    client.drop_connection()
    client.push_notification("hello")


def test_attach_twice(client, sink):
    client.attach(sink)
    with pytest.raises(EIP1193Exception):
        client.attach(Sink())


@pytest.mark.asyncio
async def test_connect_and_disconnect(client, sink):
    await client.connect()
    await client.disconnect()
    assert sink.signals == [("connect", 1337), ("disconnect", 1000, "Client disconnected.")]


@pytest.mark.asyncio
async def test_default_methods(client, sink):
    assert await client.execute("eth_chainId") == "0x539"
    assert await client.execute("net_version") == "1337"
    assert await client.execute("eth_accounts") == DEFAULT_TEST_ACCOUNTS
    assert sink.signals == [("accounts", DEFAULT_TEST_ACCOUNTS)]


@pytest.mark.asyncio
async def test_calls_recorded(client):
    await client.execute("eth_chainId")
    await client.execute("net_version", [])
    assert client.calls == [("eth_chainId", None), ("net_version", [])]


@pytest.mark.asyncio
async def test_unknown_method(client):
    with pytest.raises(ClientError) as info:
        await client.execute("eth_foo")

    assert info.value.error["code"] == -32601
    assert "eth_foo" in info.value.error["message"]


@pytest.mark.asyncio
async def test_set_result_and_error(client):
    client.set_result("eth_chainId", "0x1")
    assert await client.execute("eth_chainId") == "0x1"

    client.set_error("eth_chainId", {"code": 4001, "message": "User rejected."})
    with pytest.raises(ClientError) as info:
        await client.execute("eth_chainId")

    assert info.value.error == {"code": 4001, "message": "User rejected."}

    client.clear("eth_chainId")
    assert await client.execute("eth_chainId") == "0x539"


@pytest.mark.asyncio
async def test_set_error_exception(client):
    client.set_error("eth_call", TimeoutError("Too slow"))
    with pytest.raises(TimeoutError):
        await client.execute("eth_call")

    client.clear()
    with pytest.raises(ClientError):
        # Back to not existing.
        await client.execute("eth_call")


@pytest.mark.asyncio
async def test_subscribe_and_unsubscribe(client):
    first = await client.execute("eth_subscribe", ["newHeads"])
    second = await client.execute("eth_subscribe", ["logs", {}])
    assert (first, second) == ("0x1", "0x2")
    assert await client.execute("eth_unsubscribe", [first]) is True
    assert await client.execute("eth_unsubscribe", [first]) is False
    assert await client.execute("eth_unsubscribe", []) is False


def test_switch_chain(client, sink):
    client.connected = True
    client.switch_chain("0x5")
    assert client.chain_id == 5
    assert sink.signals == [("chain_change", 5)]


def test_switch_chain_disconnected(client, sink):
    client.switch_chain(5)
    assert client.chain_id == 5
    assert sink.signals == []


def test_set_accounts(client, sink):
    client.set_accounts(DEFAULT_TEST_ACCOUNTS[:1])
    assert client.accounts == DEFAULT_TEST_ACCOUNTS[:1]
    assert sink.signals == [("accounts", DEFAULT_TEST_ACCOUNTS[:1])]


def test_drop_connection(client, sink):
    client.connected = True
    client.drop_connection()
    assert not client.connected
    assert sink.signals == [("disconnect", 1006, "Connection lost.")]


def test_push_subscription(client, sink):
    client.push_subscription("0x1", {"number": "0x5"})
    assert sink.signals == [
        (
            "notification",
            {
                "jsonrpc": "2.0",
                "method": "eth_subscription",
                "params": {"subscription": "0x1", "result": {"number": "0x5"}},
            },
        )
    ]
