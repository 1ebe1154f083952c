# abi_downloader/models/abi_record.py
from dataclasses import dataclass, astuple
from typing import Dict

FUNCTION = "function"
EVENT = "event"

# Column order of every table written by the downloader
RECORD_COLUMNS = ("record_type", "contract_address", "name", "signature", "selector")


@dataclass(frozen=True)
class AbiRecord:
    record_type: str        # function | event
    contract_address: str   # lowercase 0x + 40 hex
    name: str               # as declared, may be empty or overloaded
    signature: str          # name(type1,type2,...)
    selector: str           # 0x + 8 hex (function) or 0x + 64 hex (event)

    def as_row(self) -> Dict[str, str]:
        return dict(zip(RECORD_COLUMNS, astuple(self)))
