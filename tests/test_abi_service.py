import json

import pytest
import requests

from abi_downloader.config import TestingConfig
from abi_downloader.errors import AbiFetchError, ConfigError
from abi_downloader.services.abi_service import EtherscanClient, create_etherscan_client, parse_v2_result

from conftest import ADDR_A, ERC20_ABI


class FakeResponse:
    def __init__(self, payload=None, status_code=200, text=None):
        self.payload = payload
        self.status_code = status_code
        self.text = text

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Server Error")

    def json(self):
        if self.text is not None:
            return json.loads(self.text)
        return self.payload


class FakeSession:
    def __init__(self, response=None, exc=None):
        self.response = response
        self.exc = exc
        self.requests = []

    def get(self, url, params=None, timeout=None):
        self.requests.append((url, params, timeout))
        if self.exc:
            raise self.exc
        return self.response


def _client(session, **kwargs):
    return EtherscanClient("key", base_url="http://example.test/api", timeout=5, session=session, **kwargs)


def test_fetch_abi_ok():
    session = FakeSession(FakeResponse({"status": "1", "message": "OK", "result": json.dumps(ERC20_ABI)}))
    abi = _client(session, chain_id=10).fetch_abi(ADDR_A)

    assert abi == ERC20_ABI
    url, params, timeout = session.requests[0]
    assert url == "http://example.test/api"
    assert params == {
        "module": "contract",
        "action": "getabi",
        "address": ADDR_A,
        "apikey": "key",
        "chainid": "10",
    }
    assert timeout == 5


def test_not_verified():
    session = FakeSession(FakeResponse({"status": "0", "message": "NOTOK", "result": "Contract source code not verified"}))
    with pytest.raises(AbiFetchError, match="not verified") as exc:
        _client(session).fetch_abi(ADDR_A)
    assert exc.value.address == ADDR_A


def test_rate_limited():
    session = FakeSession(FakeResponse({"status": "0", "message": "NOTOK", "result": "Max rate limit reached"}))
    with pytest.raises(AbiFetchError, match="rate limit"):
        _client(session).fetch_abi(ADDR_A)


def test_http_error():
    with pytest.raises(AbiFetchError, match="request failed"):
        _client(FakeSession(FakeResponse(status_code=502))).fetch_abi(ADDR_A)


def test_network_error():
    session = FakeSession(exc=requests.ConnectionError("connection refused"))
    with pytest.raises(AbiFetchError, match="connection refused"):
        _client(session).fetch_abi(ADDR_A)


def test_non_json_body():
    with pytest.raises(AbiFetchError, match="not JSON"):
        _client(FakeSession(FakeResponse(text="<html>"))).fetch_abi(ADDR_A)


def test_parse_result_variants():
    abi_str = json.dumps(ERC20_ABI)
    assert parse_v2_result(ADDR_A, {"status": "1", "result": abi_str}) == ERC20_ABI
    assert parse_v2_result(ADDR_A, {"status": "1", "result": [{"ABI": abi_str}]}) == ERC20_ABI
    assert parse_v2_result(ADDR_A, {"status": "1", "result": {"contractInfo": [{"ABI": abi_str}]}}) == ERC20_ABI
    assert parse_v2_result(ADDR_A, {"status": "1", "result": {"ContractInfo": [{"abi": abi_str}]}}) == ERC20_ABI


@pytest.mark.parametrize("data", [
    {"status": "1", "result": ""},
    {"status": "1", "result": "not json"},
    {"status": "1", "result": json.dumps({"a": 1})},
    {"status": "1", "result": [{"SourceCode": ""}]},
    {"status": "1", "result": [{"ABI": ""}]},
    {"status": "1", "result": {"other": []}},
])
def test_parse_result_rejects(data):
    with pytest.raises(AbiFetchError):
        parse_v2_result(ADDR_A, data)


def test_empty_api_key():
    with pytest.raises(ConfigError):
        EtherscanClient("  ")


def test_create_client_from_config():
    client = create_etherscan_client("key", config=TestingConfig, chain_id="137")
    assert client.base_url == TestingConfig.ETHERSCAN_V2_BASE
    assert client.chain_id == "137"
    assert isinstance(client.session, requests.Session)
