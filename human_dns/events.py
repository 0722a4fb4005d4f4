"""
human_dns.events — notifications emitted by successful registry mutations.

    Register      {name, from}
    EditUsername  {old_name, new_name, from}

Every field is a topic, so an indexer can look events up by any name key or by
the account that caused them. Events are plain frozen dataclasses returned by
the registry operations; nothing is pushed to a global bus.

Receipt form mirrors the canonical VM receipt events:

    {"name": "0x" + hex(event name), "args": [{"k": .., "t": "b", "v": "0x.."}, ...]}
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from typing import Any, Dict, List, Tuple, Union

from .types import NameKey, OwnerId, to_hex


def signature_topic(event_name: bytes) -> bytes:
    """First topic of every event: SHA3-256 of the event name."""
    return hashlib.sha3_256(event_name).digest()


@dataclass(frozen=True)
class Register:
    """Emitted whenever a new username is registered."""

    name: NameKey
    from_: OwnerId

    EVENT_NAME = b"Register"

    def args(self) -> Dict[str, bytes]:
        return {"name": bytes(self.name), "from": bytes(self.from_)}

    def topics(self) -> Tuple[bytes, ...]:
        return (signature_topic(self.EVENT_NAME), bytes(self.name), bytes(self.from_))


@dataclass(frozen=True)
class EditUsername:
    """Emitted whenever a username is renamed by its owner."""

    old_name: NameKey
    new_name: NameKey
    from_: OwnerId

    EVENT_NAME = b"EditUsername"

    def args(self) -> Dict[str, bytes]:
        return {
            "old_name": bytes(self.old_name),
            "new_name": bytes(self.new_name),
            "from": bytes(self.from_),
        }

    def topics(self) -> Tuple[bytes, ...]:
        return (
            signature_topic(self.EVENT_NAME),
            bytes(self.old_name),
            bytes(self.new_name),
            bytes(self.from_),
        )


Event = Union[Register, EditUsername]


def to_receipt(ev: Event) -> Dict[str, Any]:
    """Canonical, JSON-safe form of an event for receipts and CLI output."""
    enc_args: List[Dict[str, Any]] = [
        {"k": k, "t": "b", "v": to_hex(v)} for k, v in ev.args().items()
    ]
    return {"name": to_hex(ev.EVENT_NAME), "args": enc_args}


__all__ = ["Register", "EditUsername", "Event", "signature_topic", "to_receipt"]
