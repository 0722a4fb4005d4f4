"""
human_dns.codec — canonical CBOR encoding of the persisted registry state.

Layout (two fields plus a version tag):

    {
      "v": 1,
      "default_owner": bytes,
      "names": [[name_key, owner_id], ...]    # sorted by name_key
    }

Names are stored as a sorted list of pairs rather than a CBOR map so the
encoding of a given mapping is unique regardless of insertion order. Equal
states therefore encode to equal bytes and share a `state_digest`.
"""

from __future__ import annotations

import hashlib
from io import BytesIO
from typing import Any, Dict, Optional

import cbor2

from .config import RegistryConfig, load_config
from .errors import CodecError, HumanDnsError
from .registry import Registry

STATE_VERSION = 1


def _state_obj(registry: Registry) -> Dict[str, Any]:
    names = sorted((bytes(k), bytes(v)) for k, v in registry.items())
    return {
        "v": STATE_VERSION,
        "default_owner": bytes(registry.default_owner),
        "names": [[k, v] for k, v in names],
    }


def encode_state(registry: Registry) -> bytes:
    bio = BytesIO()
    cbor2.CBOREncoder(bio, canonical=True).encode(_state_obj(registry))
    return bio.getvalue()


def decode_state(data: bytes, *, config: Optional[RegistryConfig] = None) -> Registry:
    """
    Rebuild a Registry from `encode_state` output.

    The stored default owner must match the configured one, and every entry
    must be well-formed; otherwise CodecError is raised.
    """
    try:
        obj = cbor2.loads(data)
    except (cbor2.CBORDecodeError, ValueError, TypeError) as e:
        raise CodecError("state is not valid CBOR", details={"error": str(e)}) from e

    if not isinstance(obj, dict) or obj.get("v") != STATE_VERSION:
        raise CodecError("unsupported state version", details={"v": obj.get("v") if isinstance(obj, dict) else None})

    registry = Registry(config or load_config())
    if obj.get("default_owner") != bytes(registry.default_owner):
        raise CodecError("stored default owner does not match configuration")

    entries = obj.get("names")
    if not isinstance(entries, list):
        raise CodecError("'names' must be a list")

    names = {}
    for i, pair in enumerate(entries):
        if not isinstance(pair, list) or len(pair) != 2 or not all(isinstance(x, bytes) for x in pair):
            raise CodecError("name entry must be a [key, owner] pair of bytes", details={"index": i})
        try:
            key = registry.coerce_name(pair[0])
            owner = registry.coerce_owner(pair[1])
        except HumanDnsError as e:
            raise CodecError("malformed name entry", details={"index": i, "error": e.code}) from e
        if owner == registry.default_owner:
            raise CodecError("default owner stored as an owner", details={"index": i})
        if key in names:
            raise CodecError("duplicate name key", details={"index": i})
        names[key] = owner

    registry.restore(names)
    return registry


def state_digest(registry: Registry) -> bytes:
    """SHA3-256 of the canonical state encoding."""
    return hashlib.sha3_256(encode_state(registry)).digest()


__all__ = ["STATE_VERSION", "encode_state", "decode_state", "state_digest"]
