"""
human_dns.types — NameKey / OwnerId value types and coercion helpers.

Both are plain immutable `bytes` of a fixed length (32 by default, see
human_dns.config). Equality is bitwise. The registry never interprets a key;
it only checks its shape.

Hex strings (with or without "0x") are accepted by the coercion helpers and
normalized to bytes, so the same call works from Python, JSON or the CLI.
"""

from __future__ import annotations

import hashlib
from typing import NewType, Union

from .errors import InvalidInput

NameKey = NewType("NameKey", bytes)
OwnerId = NewType("OwnerId", bytes)

BytesLike = Union[bytes, bytearray, memoryview, str]


def _strip_0x(s: str) -> str:
    return s[2:] if s.startswith(("0x", "0X")) else s


def to_bytes(value: BytesLike, *, field: str = "value") -> bytes:
    """
    Coerce `value` to bytes.
    - If str, interpret as hex (with or without '0x'); odd-length hex is rejected.
    - If a bytes-like object, copy to immutable bytes.
    """
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    if isinstance(value, str):
        h = _strip_0x(value.strip())
        if len(h) % 2 != 0:
            raise InvalidInput(f"{field}: hex string must have even length", field=field, reason="odd_hex")
        try:
            return bytes.fromhex(h)
        except ValueError:
            raise InvalidInput(f"{field}: invalid hex string", field=field, reason="bad_hex") from None
    raise InvalidInput(
        f"{field}: cannot convert {type(value).__name__} to bytes",
        field=field,
        reason="bad_type",
    )


def to_hex(b: Union[bytes, bytearray, memoryview]) -> str:
    """Encode bytes as 0x-prefixed lowercase hex."""
    return "0x" + bytes(b).hex()


def _fixed(value: BytesLike, length: int, field: str) -> bytes:
    b = to_bytes(value, field=field)
    if len(b) != length:
        raise InvalidInput(
            f"{field} must be exactly {length} bytes",
            field=field,
            reason="bad_length",
            details={"len": len(b)},
        )
    return b


def name_key(value: BytesLike, length: int = 32) -> NameKey:
    return NameKey(_fixed(value, length, "name"))


def owner_id(value: BytesLike, length: int = 32) -> OwnerId:
    return OwnerId(_fixed(value, length, "owner"))


def hash_label(label: str, length: int = 32) -> NameKey:
    """
    Client-side helper: BLAKE2b digest of a UTF-8 username, sized to a name key.
    The registry itself never sees or hashes labels.
    """
    return NameKey(hashlib.blake2b(label.encode("utf-8"), digest_size=length).digest())


__all__ = [
    "NameKey",
    "OwnerId",
    "BytesLike",
    "to_bytes",
    "to_hex",
    "name_key",
    "owner_id",
    "hash_label",
]
