"""
human_dns.host — local stand-in for the execution environment.

The registry itself knows nothing about dispatch, callers or commits. The
Host plays that role for local runs, tests and the CLI:

- dispatches calls by ABI name (aliases included) with an explicit caller,
- serializes calls (one runs to completion before the next starts),
- journals each mutating call: snapshot → run → commit, or restore on error,
- turns every outcome into a Receipt, so failures come back as values,
- keeps an append-only, topic-indexed log of committed events.

Usage
-----
    host = Host()
    r = host.call("register", name, caller=alice)
    assert r.ok
    host.call("resolve", name).return_value == alice
    host.events.query(topic=alice)
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

from . import abi
from .config import RegistryConfig
from .errors import HumanDnsError, InvalidInput
from .events import Event, to_receipt
from .registry import Registry
from .types import BytesLike, to_hex

log = logging.getLogger(__name__)


@dataclass
class Receipt:
    """Outcome of one host call."""

    ok: bool
    method: str
    caller: Optional[bytes] = None
    return_value: Any = None
    events: Tuple[Event, ...] = ()
    error: Optional[HumanDnsError] = None

    def to_dict(self) -> Dict[str, Any]:
        rv = self.return_value
        return {
            "ok": self.ok,
            "method": self.method,
            "caller": to_hex(self.caller) if self.caller is not None else None,
            "return": to_hex(rv) if isinstance(rv, (bytes, bytearray)) else rv,
            "events": [to_receipt(e) for e in self.events],
            "error": self.error.to_dict() if self.error is not None else None,
        }


@dataclass
class EventLog:
    """Committed events in commit order, queryable by event name and/or topic."""

    _entries: List[Event] = field(default_factory=list)

    def append(self, events: Sequence[Event]) -> None:
        self._entries.extend(events)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self):
        return iter(tuple(self._entries))

    def query(self, name: Optional[bytes] = None, topic: Optional[bytes] = None) -> List[Event]:
        out: List[Event] = []
        for ev in self._entries:
            if name is not None and ev.EVENT_NAME != name:
                continue
            if topic is not None and bytes(topic) not in ev.topics():
                continue
            out.append(ev)
        return out


class Host:
    def __init__(self, registry: Optional[Registry] = None, *, config: Optional[RegistryConfig] = None) -> None:
        self.registry = registry or Registry(config)
        self.events = EventLog()
        self._lock = threading.RLock()

    def call(self, method: str, *args: BytesLike, caller: Optional[BytesLike] = None) -> Receipt:
        """
        Execute one call against the registry and return its Receipt.

        Mutating methods require `caller`. Domain and input errors are caught
        and reported in the receipt; the registry is restored to its pre-call
        state whenever a mutating call fails.
        """
        with self._lock:
            try:
                fn = abi.resolve_method(method)
            except HumanDnsError as e:
                return Receipt(ok=False, method=method, error=e)

            name = fn["name"]
            try:
                who = self._coerce_caller(caller) if fn["mutates"] else None
                if len(args) != len(fn["inputs"]):
                    raise InvalidInput(
                        f"{name} expects {len(fn['inputs'])} argument(s), got {len(args)}",
                        field="args",
                        reason="arity",
                    )
            except HumanDnsError as e:
                return Receipt(ok=False, method=name, error=e)

            if not fn["mutates"]:
                try:
                    rv = self.registry.resolve(*args)
                except HumanDnsError as e:
                    return Receipt(ok=False, method=name, error=e)
                return Receipt(ok=True, method=name, return_value=bytes(rv))

            return self._transact(name, args, who)

    def _coerce_caller(self, caller: Optional[BytesLike]) -> bytes:
        if caller is None:
            raise InvalidInput("mutating call requires a caller", field="caller", reason="missing")
        return bytes(self.registry.coerce_owner(caller))

    def _transact(self, name: str, args: Sequence[BytesLike], caller: bytes) -> Receipt:
        journal = self.registry.snapshot()
        try:
            if name == "register":
                events = self.registry.register(args[0], caller)
            else:
                events = self.registry.rename(args[0], args[1], caller)
        except HumanDnsError as e:
            self.registry.restore(journal)
            log.debug("%s by %s rolled back: %s", name, to_hex(caller), e.code)
            return Receipt(ok=False, method=name, caller=caller, error=e)
        except Exception:
            self.registry.restore(journal)
            raise

        self.events.append(events)
        log.debug("%s by %s committed (%d event(s))", name, to_hex(caller), len(events))
        return Receipt(ok=True, method=name, caller=caller, events=tuple(events))


__all__ = ["Receipt", "EventLog", "Host"]
