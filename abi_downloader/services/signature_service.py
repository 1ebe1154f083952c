# abi_downloader/services/signature_service.py
from typing import Any, Dict, List, Mapping, Optional, Tuple

from web3 import Web3

from abi_downloader.errors import AbiFetchError
from abi_downloader.models import AbiRecord, FUNCTION, EVENT, parse_param

AbiEntry = Mapping[str, Any]


# ---------------------------
# Canonical types / signatures
# ---------------------------

def canonical_type(param: Mapping[str, Any]) -> Optional[str]:
    """Selector type of one ABI parameter, or None if it cannot be derived."""
    node = parse_param(param)
    return node.canonical() if node is not None else None


def signature(entry: AbiEntry) -> str:
    """
    `name(type1,type2,...)` for a function or event entry.

    Parameters whose type cannot be resolved are left out of the list
    instead of failing the whole signature.
    """
    types = []
    for param in entry.get("inputs") or []:
        ctype = canonical_type(param) if isinstance(param, Mapping) else None
        if ctype is not None:
            types.append(ctype)
    return f"{entry.get('name') or ''}({','.join(types)})"


def _keccak(text: str) -> bytes:
    return bytes(Web3.keccak(text=text))


def function_selector(entry: AbiEntry) -> str:
    """First 4 bytes of keccak256(signature), 0x-prefixed."""
    return "0x" + _keccak(signature(entry))[:4].hex()


def event_selector(entry: AbiEntry) -> str:
    """Full 32-byte keccak256(signature) (topic0), 0x-prefixed."""
    return "0x" + _keccak(signature(entry)).hex()


# ---------------------------
# Rows for one contract
# ---------------------------

def _check_entry(address: str, entry: AbiEntry) -> None:
    inputs = entry.get("inputs")
    if inputs is not None and not isinstance(inputs, list):
        raise AbiFetchError(address, f"malformed ABI entry, inputs is not a list: {entry!r}")
    name = entry.get("name")
    if name is not None and not isinstance(name, str):
        raise AbiFetchError(address, f"malformed ABI entry, name is not a string: {entry!r}")


def _record(record_type: str, address: str, entry: AbiEntry) -> AbiRecord:
    selector = function_selector(entry) if record_type == FUNCTION else event_selector(entry)
    return AbiRecord(
        record_type=record_type,
        contract_address=address.lower(),
        name=entry.get("name") or "",
        signature=signature(entry),
        selector=selector,
    )


def process_contract(address: str, abi: List[Dict[str, Any]]) -> Tuple[List[AbiRecord], List[AbiRecord]]:
    """
    Split an ABI into function rows and event rows, in declaration order.
    Constructors, fallback/receive and custom errors are ignored.
    Raises AbiFetchError when the ABI or a function/event entry is malformed.
    """
    if not isinstance(abi, list):
        raise AbiFetchError(address, f"ABI is not a list: {type(abi).__name__}")

    functions, events = [], []
    for entry in abi:
        if not isinstance(entry, Mapping):
            continue
        kind = entry.get("type", FUNCTION)  # "type" may be omitted for functions
        if kind in (FUNCTION, EVENT):
            _check_entry(address, entry)
        if kind == FUNCTION:
            functions.append(_record(FUNCTION, address, entry))
        elif kind == EVENT:
            events.append(_record(EVENT, address, entry))
    return functions, events
