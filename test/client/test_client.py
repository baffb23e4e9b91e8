import pytest
from hexbytes import HexBytes
from eth_utils import keccak

from fixtures.general import rpc
from fixtures.w3 import (
    DAI_ADDRESS,
    DAI_CODE,
    LATEST_BLOCK,
    MINED_TX,
    PENDING_TX,
    Web3Mock,
    reverted,
)
from indexer.abi import decimals_msg
from indexer.client import DirtyDump, Dump, EthClient
from indexer.errors import (
    CallCancelled,
    ConnectionClosed,
    DeadlineExceeded,
    NotFound,
    RPCError,
    TransportError,
)


async def test_block_by_number(client: EthClient):
    latest = await client.block_by_number()
    assert latest["number"] == LATEST_BLOCK
    block = await client.block_by_number(15632000)
    assert block["number"] == 15632000
    with pytest.raises(NotFound):
        await client.block_by_number(LATEST_BLOCK + 1)


async def test_block_by_hash(client: EthClient):
    block_hash = HexBytes(keccak(LATEST_BLOCK)).to_0x_hex()
    block = await client.block_by_hash(block_hash)
    assert block["number"] == LATEST_BLOCK
    with pytest.raises(NotFound):
        await client.block_by_hash("0x" + "00" * 32)


async def test_transactions(client: EthClient):
    tx, is_pending = await client.transaction_by_hash(MINED_TX)
    assert tx["blockNumber"] == LATEST_BLOCK
    assert not is_pending
    _, is_pending = await client.transaction_by_hash(PENDING_TX)
    assert is_pending
    with pytest.raises(NotFound):
        await client.transaction_by_hash("0x" + "33" * 32)

    receipt = await client.transaction_receipt(MINED_TX)
    assert receipt["status"] == 1
    with pytest.raises(NotFound):
        await client.transaction_receipt(PENDING_TX)


async def test_balance_and_code(client: EthClient):
    assert await client.balance_at(DAI_ADDRESS.lower(), 15632000) == int(
        DAI_ADDRESS[2:], 16
    ) % 1000
    assert await client.code_at(DAI_ADDRESS) == DAI_CODE
    assert await client.code_at("0x" + "00" * 20) == HexBytes(b"")


async def test_call_contract(client: EthClient, w3_mock: Web3Mock):
    raw = await client.call_contract(decimals_msg(DAI_ADDRESS), block_number=100)
    assert int.from_bytes(raw, "big") == 18
    assert w3_mock.calls == [({"to": DAI_ADDRESS, "data": "0x313ce567"}, 100)]


async def test_call_contract_reverted(client: EthClient, w3_mock: Web3Mock):
    w3_mock.call_responses["0x313ce567"] = reverted()
    with pytest.raises(RPCError) as e:
        await client.call_contract(decimals_msg(DAI_ADDRESS))
    assert e.value.code == 3
    assert isinstance(e.value, TransportError)


@pytest.mark.parametrize("block_number", [-1, "pending", 1.5, True])
async def test_invalid_block_number(client: EthClient, block_number):
    with pytest.raises(ValueError):
        await client.balance_at(DAI_ADDRESS, block_number)


async def test_invalid_address(client: EthClient, w3_mock: Web3Mock):
    with pytest.raises(ValueError):
        await client.code_at(None)
    with pytest.raises(ValueError):
        await client.balance_at("0x1234")
    assert w3_mock.number_of_calls == 0


async def test_invoke_error(client: EthClient):
    with pytest.raises(RPCError) as e:
        await client.invoke("debug_unknown", [1])
    assert e.value.code == -32601
    assert e.value.method == "debug_unknown"


async def test_dump_block(client: EthClient, w3_mock: Web3Mock):
    w3_mock.rpc_responses["debug_dumpBlock"] = {
        "result": {
            "root": "0xd7f8974fb5ac78d9ac099b9ad5018bedc2ce0a72dad1827a1709da30580f0544",
            "accounts": {
                "6b175474e89094c44da98b954eedeac495271d0f": {
                    "balance": "0",
                    "nonce": 1,
                    "root": "0x56e8",
                    "codeHash": "0x4e36",
                    "code": "0x6080",
                    "storage": {"0x00": "0x01"},
                }
            },
        }
    }
    dump = await client.dump_block(255)
    assert w3_mock.requests == [("debug_dumpBlock", ["0xff"])]
    assert isinstance(dump, Dump)
    account = dump.accounts["6b175474e89094c44da98b954eedeac495271d0f"]
    assert account.nonce == 1
    assert account.storage == {"0x00": "0x01"}

    with pytest.raises(ValueError):
        await client.dump_block(-1)
    with pytest.raises(ValueError):
        await client.dump_block(None)


async def test_modified_account_states(client: EthClient, w3_mock: Web3Mock):
    w3_mock.rpc_responses["debug_getModifiedAccountStatesByNumber"] = {
        "result": {
            "root": "0x01",
            "accounts": {"6b175474e89094c44da98b954eedeac495271d0f": {"balance": "10"}},
        }
    }
    diff = await client.modified_account_states_by_number(15632000)
    assert w3_mock.requests == [
        ("debug_getModifiedAccountStatesByNumber", [15632000])
    ]
    assert isinstance(diff, DirtyDump)
    assert diff.accounts["6b175474e89094c44da98b954eedeac495271d0f"].balance == "10"

    for bad in [-1, 2**64, "0x10"]:
        with pytest.raises(ValueError):
            await client.modified_account_states_by_number(bad)


async def test_expired_deadline(client: EthClient, w3_mock: Web3Mock):
    with pytest.raises(DeadlineExceeded) as e:
        await client.block_by_number(timeout=0)
    assert isinstance(e.value, CallCancelled)
    assert isinstance(e.value, TimeoutError)
    assert w3_mock.number_of_calls == 0


async def test_slow_call(client: EthClient, w3_mock: Web3Mock):
    w3_mock.delay = 10
    with pytest.raises(DeadlineExceeded):
        await client.code_at(DAI_ADDRESS, timeout=0.01)


async def test_default_timeout(w3_mock: Web3Mock):
    w3_mock.delay = 10
    client = EthClient(w3=w3_mock, timeout=0.01)
    with pytest.raises(DeadlineExceeded):
        await client.balance_at(DAI_ADDRESS)


async def test_transport_error(client: EthClient, w3_mock: Web3Mock):
    w3_mock.code_error = ConnectionRefusedError("connection refused")
    with pytest.raises(TransportError) as e:
        await client.code_at(DAI_ADDRESS)
    assert isinstance(e.value.__cause__, ConnectionRefusedError)


async def test_close(w3_mock: Web3Mock):
    async with EthClient(w3=w3_mock) as client:
        assert not client.closed
        await client.code_at(DAI_ADDRESS)
    assert client.closed
    assert w3_mock.disconnects == 1

    await client.close()
    assert w3_mock.disconnects == 1

    calls = w3_mock.number_of_calls
    with pytest.raises(ConnectionClosed):
        await client.code_at(DAI_ADDRESS)
    with pytest.raises(ConnectionClosed):
        await client.invoke("debug_dumpBlock", ["0x1"])
    assert w3_mock.number_of_calls == calls


async def test_close_without_connection():
    client = EthClient(rpc="http://localhost:8545")
    await client.close()
    assert client.closed


async def test_dial_http():
    client = await EthClient.dial("http://localhost:8545", timeout=3)
    assert client.rpc == "http://localhost:8545"
    assert client.timeout == 3
    await client.close()


@rpc
async def test_live_block(live_client: EthClient):
    block = await live_client.block_by_number()
    assert block["number"] > 0
