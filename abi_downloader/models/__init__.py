# abi_downloader/models/__init__.py
from .abi_record import AbiRecord, RECORD_COLUMNS, FUNCTION, EVENT  # noqa
from .types import AbiType, Elementary, ArrayOf, TupleOf, parse_param  # noqa

__all__ = [
    "AbiRecord",
    "RECORD_COLUMNS",
    "FUNCTION",
    "EVENT",
    "AbiType",
    "Elementary",
    "ArrayOf",
    "TupleOf",
    "parse_param",
]
