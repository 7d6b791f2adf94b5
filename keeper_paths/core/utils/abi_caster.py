"""Coerce config and JSON values to the Python types an ABI input expects."""

from __future__ import annotations

from typing import Any

from eth_utils import to_checksum_address


def _to_int(arg: Any) -> int:
    if isinstance(arg, str) and arg.startswith("0x"):
        return int(arg, 16)
    return int(arg)


def _to_bool(arg: Any) -> bool:
    if isinstance(arg, str):
        return arg.strip().lower() in ("true", "1")
    return bool(arg)


def _to_bytes(arg: Any) -> bytes:
    if isinstance(arg, (bytes, bytearray)):
        return bytes(arg)
    text = str(arg)
    return bytes.fromhex(text[2:]) if text.startswith("0x") else text.encode()


def cast_single(arg: Any, abi_type: str) -> Any:
    """Coerce config or JSON values (hex strings, "true", ...) to *abi_type*."""
    t = abi_type.strip()
    if t == "address":
        return to_checksum_address(str(arg))
    if t == "bool":
        return _to_bool(arg)
    if t.startswith(("uint", "int")):
        return _to_int(arg)
    if t.startswith("bytes"):
        return _to_bytes(arg)
    if t == "string":
        return str(arg)
    return arg


def _cast_value(arg: Any, inp: dict[str, Any]) -> Any:
    t = inp.get("type", "").strip()
    components = inp.get("components") or []

    if t.endswith("]"):
        if not isinstance(arg, (list, tuple)):
            raise TypeError(f"Expected list for {t}, got {type(arg).__name__}")
        element = {"type": t[: t.rindex("[")], "components": components}
        return [_cast_value(item, element) for item in arg]

    if t == "tuple":
        # structs may be given by field name, e.g. a trade descriptor dict
        if isinstance(arg, dict):
            arg = [arg.get(c["name"]) for c in components]
        if not isinstance(arg, (list, tuple)):
            raise TypeError(
                f"Expected dict or sequence for tuple, got {type(arg).__name__}"
            )
        return tuple(cast_args(list(arg), components))

    return cast_single(arg, t)


def cast_args(args: list[Any], abi_inputs: list[dict[str, Any]]) -> list[Any]:
    if len(args) != len(abi_inputs):
        raise ValueError(
            f"Argument count mismatch: got {len(args)}, expected {len(abi_inputs)}"
        )
    return [_cast_value(arg, inp) for arg, inp in zip(args, abi_inputs, strict=True)]
