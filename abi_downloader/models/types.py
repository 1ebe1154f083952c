# abi_downloader/models/types.py
import re
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Tuple, Union

# base type followed by zero or more array suffixes: uint256[2][]
_TYPE_RE = re.compile(r"^(?P<base>[a-z]+[0-9x]*)(?P<dims>(?:\[(?:[1-9][0-9]*)?\])*)$")
_DIM_RE = re.compile(r"\[([0-9]*)\]")
_INT_RE = re.compile(r"^u?int(?P<bits>[1-9][0-9]*)$")
_BYTES_RE = re.compile(r"^bytes(?P<size>[1-9][0-9]*)$")
_FIXED_RE = re.compile(r"^u?fixed(?P<bits>[1-9][0-9]*)x(?P<decimals>[1-9][0-9]*)$")

_PLAIN_TYPES = frozenset({"address", "bool", "string", "bytes", "function"})

# Shorthands Solidity accepts but selectors never use
_ALIASES = {
    "uint": "uint256",
    "int": "int256",
    "fixed": "fixed128x18",
    "ufixed": "ufixed128x18",
    "byte": "bytes1",
}


@dataclass(frozen=True)
class Elementary:
    name: str

    def canonical(self) -> str:
        return self.name


@dataclass(frozen=True)
class ArrayOf:
    inner: "AbiType"
    length: Optional[int] = None   # None = dynamic

    def canonical(self) -> str:
        suffix = "[]" if self.length is None else f"[{self.length}]"
        return self.inner.canonical() + suffix


@dataclass(frozen=True)
class TupleOf:
    components: Tuple["AbiType", ...]

    def canonical(self) -> str:
        return "(" + ",".join(c.canonical() for c in self.components) + ")"


AbiType = Union[Elementary, ArrayOf, TupleOf]


def _elementary(name: str) -> Optional[Elementary]:
    name = _ALIASES.get(name, name)
    if name in _PLAIN_TYPES:
        return Elementary(name)

    m = _INT_RE.match(name)
    if m:
        bits = int(m.group("bits"))
        return Elementary(name) if 8 <= bits <= 256 and bits % 8 == 0 else None

    m = _BYTES_RE.match(name)
    if m:
        return Elementary(name) if 1 <= int(m.group("size")) <= 32 else None

    m = _FIXED_RE.match(name)
    if m:
        bits, decimals = int(m.group("bits")), int(m.group("decimals"))
        if 8 <= bits <= 256 and bits % 8 == 0 and 0 < decimals <= 80:
            return Elementary(name)
    return None


def parse_param(param: Mapping[str, Any]) -> Optional[AbiType]:
    """
    Build the type tree of one JSON-ABI parameter.

    Returns None when the declared type cannot be resolved: unknown or
    malformed type strings, tuples without a components list, or tuples
    with any unresolvable component.
    """
    raw = param.get("type")
    if not isinstance(raw, str):
        return None

    m = _TYPE_RE.match(raw.strip())
    if not m:
        return None

    base = m.group("base")
    if base == "tuple":
        components = param.get("components")
        if not isinstance(components, list):
            return None
        parsed = [parse_param(c) if isinstance(c, Mapping) else None for c in components]
        if any(p is None for p in parsed):
            return None
        node: Optional[AbiType] = TupleOf(tuple(parsed))
    else:
        node = _elementary(base)
        if node is None:
            return None

    # sizes were checked by _TYPE_RE: positive, no leading zeros
    for dim in _DIM_RE.findall(m.group("dims")):
        node = ArrayOf(node, int(dim) if dim else None)
    return node
