import json
import logging
from typing import Any, Dict, List, Optional

import requests

from abi_downloader.config import BaseConfig
from abi_downloader.errors import AbiFetchError, ConfigError

logger = logging.getLogger(__name__)


# ---------------------------
# Etherscan v2 parsing
# ---------------------------

def _loads_abi(address: str, abi_str: Any) -> List[dict]:
    if not abi_str:
        raise AbiFetchError(address, "empty ABI field in response")
    try:
        abi = json.loads(abi_str) if isinstance(abi_str, str) else abi_str
    except json.JSONDecodeError as e:
        raise AbiFetchError(address, f"ABI is not valid JSON: {e}") from e
    if not isinstance(abi, list):
        raise AbiFetchError(address, "parsed ABI is not a list")
    return abi


def parse_v2_result(address: str, data: Dict[str, Any]) -> List[dict]:
    """
    Return the ABI (list of entries) carried by an Etherscan v2 response.

    Etherscan v2 may return:
      - data["result"] as a JSON string (getabi)
      - data["result"][0]["ABI"]
      - data["result"]["contractInfo"][0]["ABI"] (or "ContractInfo")
    """
    if str(data.get("status")) == "0":
        message = data.get("message") or data.get("Message") or "NOTOK"
        raise AbiFetchError(address, f"Etherscan error: {message} - {data.get('result')}")

    res = data.get("result")
    if not res:
        raise AbiFetchError(address, f"missing 'result' in response: {data}")

    if isinstance(res, str):
        return _loads_abi(address, res)

    if isinstance(res, dict):
        info_list = res.get("contractInfo") or res.get("ContractInfo")
        if isinstance(info_list, list) and info_list and isinstance(info_list[0], dict):
            info = info_list[0]
            return _loads_abi(address, info.get("ABI") or info.get("Abi") or info.get("abi"))

    if isinstance(res, list) and res and isinstance(res[0], dict):
        first = res[0]
        if any(k in first for k in ("ABI", "Abi", "abi")):
            return _loads_abi(address, first.get("ABI") or first.get("Abi") or first.get("abi"))

    raise AbiFetchError(address, f"could not interpret Etherscan v2 response: {data}")


# ---------------------------
# Client
# ---------------------------

class EtherscanClient:
    """Fetches verified contract ABIs from Etherscan v2 for one chain."""

    def __init__(
        self,
        api_key: str,
        chain_id: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        if not api_key or not api_key.strip():
            raise ConfigError("ETHERSCAN_API_KEY is empty")
        self.api_key = api_key.strip()
        self.chain_id = str(chain_id or BaseConfig.ETHERSCAN_CHAIN_ID)
        self.base_url = base_url or BaseConfig.ETHERSCAN_V2_BASE
        self.timeout = timeout if timeout is not None else BaseConfig.ETHERSCAN_TIMEOUT
        self.session = session or requests.Session()

    def close(self) -> None:
        self.session.close()

    def fetch_abi(self, address: str) -> List[dict]:
        params = {
            "module": "contract",
            "action": "getabi",
            "address": address,
            "apikey": self.api_key,
            "chainid": self.chain_id,
        }

        try:
            resp = self.session.get(self.base_url, params=params, timeout=self.timeout)
            resp.raise_for_status()
            data = resp.json()
        except requests.RequestException as e:
            raise AbiFetchError(address, f"request failed: {e}") from e
        except ValueError as e:
            raise AbiFetchError(address, f"response is not JSON: {e}") from e

        if not isinstance(data, dict):
            raise AbiFetchError(address, f"unexpected response body: {data!r}")
        return parse_v2_result(address, data)


def create_etherscan_client(api_key: str, config=BaseConfig, chain_id: Optional[str] = None) -> EtherscanClient:
    client = EtherscanClient(
        api_key,
        chain_id=chain_id or config.ETHERSCAN_CHAIN_ID,
        base_url=config.ETHERSCAN_V2_BASE,
        timeout=config.ETHERSCAN_TIMEOUT,
    )
    logger.info("Etherscan client ready (chainid=%s)", client.chain_id)
    return client
