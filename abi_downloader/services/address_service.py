from pathlib import Path
from typing import List

from eth_utils import is_hex_address, to_normalized_address

from abi_downloader.errors import InvalidAddressError


def normalize_address(addr: str) -> str:
    """Lowercase 0x + 40 hex form of a contract address (raises on invalid)."""
    if not isinstance(addr, str) or not is_hex_address(addr.strip()):
        raise InvalidAddressError(f"Invalid contract address: {addr!r}")
    return to_normalized_address(addr.strip())


def read_addresses(filename) -> List[str]:
    """
    One address per line. Blank lines and lines that are not valid UTF-8
    are dropped; nothing is validated here.
    """
    addresses = []
    with Path(filename).open("rb") as f:
        for raw in f:
            try:
                line = raw.decode("utf-8").strip()
            except UnicodeDecodeError:
                continue
            if line:
                addresses.append(line)
    return addresses
