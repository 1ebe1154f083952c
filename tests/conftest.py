import pytest

from abi_downloader.errors import AbiFetchError

ERC20_ABI = [
    {"type": "constructor", "inputs": [{"name": "supply", "type": "uint256"}]},
    {
        "type": "function",
        "name": "transfer",
        "inputs": [{"name": "to", "type": "address"}, {"name": "amount", "type": "uint256"}],
        "outputs": [{"name": "", "type": "bool"}],
        "stateMutability": "nonpayable",
    },
    {
        "type": "function",
        "name": "balanceOf",
        "inputs": [{"name": "owner", "type": "address"}],
        "outputs": [{"name": "", "type": "uint256"}],
        "stateMutability": "view",
    },
    {
        "type": "event",
        "name": "Transfer",
        "anonymous": False,
        "inputs": [
            {"name": "from", "type": "address", "indexed": True},
            {"name": "to", "type": "address", "indexed": True},
            {"name": "value", "type": "uint256", "indexed": False},
        ],
    },
    {"type": "error", "name": "InsufficientBalance", "inputs": []},
    {"type": "fallback"},
]

ADDR_A = "0x" + "a" * 40
ADDR_B = "0x" + "b" * 40
ADDR_C = "0x" + "c" * 40


class FakeClient:
    """Scripted stand-in for EtherscanClient: address -> ABI list or exception."""

    def __init__(self, responses):
        self.responses = {k.lower(): v for k, v in responses.items()}
        self.calls = []
        self.closed = False

    def close(self):
        self.closed = True

    def fetch_abi(self, address):
        self.calls.append(address)
        resp = self.responses.get(address.lower())
        if resp is None:
            raise AbiFetchError(address, "Contract source code not verified")
        if isinstance(resp, Exception):
            raise resp
        return resp


@pytest.fixture()
def erc20_abi():
    return [dict(e) for e in ERC20_ABI]


@pytest.fixture()
def fake_client_factory():
    return FakeClient


@pytest.fixture()
def sleeps():
    calls = []

    def fake_sleep(seconds):
        calls.append(seconds)

    fake_sleep.calls = calls
    return fake_sleep


@pytest.fixture()
def config_file(tmp_path):
    path = tmp_path / "config.ini"
    path.write_text("[api_keys]\nETHERSCAN_API_KEY = test-key\n", encoding="utf-8")
    return path
