from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from eth_abi.packed import encode_packed
from eth_utils import to_checksum_address
from hexbytes import HexBytes

from keeper_paths.core.adapters.BaseAdapter import BaseAdapter

# operation(1) | to(20) | value(32) | data length(32) | data
CALL_OPERATION = 0
_HEADER_SIZE = 1 + 20 + 32 + 32
_PACKED_TYPES = ["uint8", "address", "uint256", "uint256", "bytes"]


@dataclass(frozen=True)
class MulticallCall:
    target: str
    call_data: bytes | str
    value: int = 0

    def as_transaction(self) -> dict[str, Any]:
        return {
            "to": self.target,
            "data": "0x" + _normalize_call_data(self.call_data).hex(),
            "value": int(self.value),
        }


def _normalize_call_data(data: bytes | str) -> bytes:
    if isinstance(data, HexBytes):
        return bytes(data)
    if isinstance(data, (bytes, bytearray)):
        return bytes(data)
    if isinstance(data, str):
        if data.startswith("0x"):
            return bytes.fromhex(data[2:])
        if data == "":
            return b""
        raise ValueError(f"Calldata must be 0x-prefixed hex, got {data[:10]!r}")
    raise TypeError("Unsupported calldata type")


def _coerce_call(call: MulticallCall | dict[str, Any]) -> MulticallCall:
    if isinstance(call, MulticallCall):
        return call
    return MulticallCall(
        target=call["to"],
        call_data=call.get("data") or b"",
        value=int(call.get("value") or 0),
    )


def encode_transaction(call: MulticallCall | dict[str, Any]) -> bytes:
    call = _coerce_call(call)
    data = _normalize_call_data(call.call_data)
    return encode_packed(
        _PACKED_TYPES,
        [
            CALL_OPERATION,
            to_checksum_address(call.target),
            int(call.value),
            len(data),
            data,
        ],
    )


def merge_transactions(calls: Iterable[MulticallCall | dict[str, Any]]) -> str:
    """Pack calls, in order, into the payload replayed by the multicall swapper."""
    return "0x" + b"".join(encode_transaction(c) for c in calls).hex()


def unpack_transactions(payload: bytes | str) -> list[MulticallCall]:
    raw = _normalize_call_data(payload)
    calls: list[MulticallCall] = []
    offset = 0
    while offset < len(raw):
        if len(raw) - offset < _HEADER_SIZE:
            raise ValueError(f"Truncated call header at offset {offset}")
        operation = raw[offset]
        if operation != CALL_OPERATION:
            raise ValueError(f"Unsupported operation {operation} at offset {offset}")
        target = to_checksum_address(raw[offset + 1 : offset + 21])
        value = int.from_bytes(raw[offset + 21 : offset + 53], "big")
        length = int.from_bytes(raw[offset + 53 : offset + 85], "big")
        start = offset + _HEADER_SIZE
        if start + length > len(raw):
            raise ValueError(f"Truncated calldata for call at offset {offset}")
        calls.append(
            MulticallCall(
                target=target, call_data=raw[start : start + length], value=value
            )
        )
        offset = start + length
    return calls


class MulticallAdapter(BaseAdapter):
    adapter_type = "MULTICALL"

    def __init__(self, config: dict[str, Any] | None = None) -> None:
        super().__init__("multicall_adapter", config)

    def build_call(
        self, target: str, call_data: bytes | str, value: int = 0
    ) -> MulticallCall:
        return MulticallCall(
            target=to_checksum_address(target),
            call_data=_normalize_call_data(call_data),
            value=int(value),
        )

    def merge(self, calls: Iterable[MulticallCall | dict[str, Any]]) -> str:
        calls_list = [_coerce_call(c) for c in calls]
        data = merge_transactions(calls_list)
        self.logger.debug(f"Merged {len(calls_list)} calls into {data}")
        return data
