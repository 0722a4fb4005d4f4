"""
Human DNS (human_dns) — a registry of hashed usernames to account ids.

Public surface:

- Registry                         the name-key → owner-id mapping and its three operations
    resolve(name) -> owner         default owner for unregistered names
    register(name, caller)         -> [Register]        | UsernameAlreadyExists
    rename(old, new, caller)       -> [EditUsername]    | CallerIsNotOwner / UsernameAlreadyExists
- Host                             local execution environment returning Receipts
- RegistryConfig / load_config     sizing, rename policy, state path, log level
- encode_state / decode_state      canonical CBOR persistence
"""

from __future__ import annotations

from .codec import decode_state, encode_state, state_digest
from .config import RegistryConfig, RenamePolicy, load_config
from .errors import (CallerIsNotOwner, HumanDnsError, InvalidInput,
                     UsernameAlreadyExists)
from .events import EditUsername, Register
from .host import EventLog, Host, Receipt
from .registry import Registry
from .store import StateStore
from .types import hash_label, name_key, owner_id
from .version import __version__


def version() -> str:
    """Return the human_dns version string."""
    return __version__


__all__ = [
    "__version__",
    "version",
    "Registry",
    "Host",
    "Receipt",
    "EventLog",
    "RegistryConfig",
    "RenamePolicy",
    "load_config",
    "Register",
    "EditUsername",
    "HumanDnsError",
    "UsernameAlreadyExists",
    "CallerIsNotOwner",
    "InvalidInput",
    "encode_state",
    "decode_state",
    "state_digest",
    "StateStore",
    "hash_label",
    "name_key",
    "owner_id",
]
