"""
human_dns.registry — the name-key → owner-id registry.

Maps hash representations of human-readable usernames to account ids. Any
caller may claim a free name; the owner of a name may rename it.

Invariants
----------
- A name key has at most one owner.
- A present key was written by `register` from its owner, or moved there by a
  `rename` issued by that same owner.
- `rename` drops the old key and writes the new one in the same operation.
- The default owner is only ever returned for absent keys, never stored.

Every operation validates completely before it mutates, so a raised error
always leaves the mapping exactly as it was. Callers are passed explicitly and
trusted as given; events are returned to the caller rather than broadcast.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterator, List, Mapping, Optional, Tuple

from .config import RegistryConfig, RenamePolicy, load_config
from .errors import CallerIsNotOwner, InvalidInput, UsernameAlreadyExists
from .events import EditUsername, Event, Register
from .types import BytesLike, NameKey, OwnerId, name_key, owner_id, to_hex

log = logging.getLogger(__name__)


class Registry:
    def __init__(self, config: Optional[RegistryConfig] = None) -> None:
        self.config = config or load_config()
        self._names: Dict[NameKey, OwnerId] = {}
        self._default_owner: OwnerId = OwnerId(self.config.default_owner)

    # ---- coercion ---- #

    def coerce_name(self, value: BytesLike) -> NameKey:
        return name_key(value, self.config.name_len)

    def coerce_owner(self, value: BytesLike) -> OwnerId:
        return owner_id(value, self.config.owner_len)

    # ---- views ---- #

    @property
    def default_owner(self) -> OwnerId:
        return self._default_owner

    @property
    def rename_policy(self) -> RenamePolicy:
        return self.config.rename_policy

    def __len__(self) -> int:
        return len(self._names)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, (bytes, bytearray)) and bytes(name) in self._names

    def items(self) -> Iterator[Tuple[NameKey, OwnerId]]:
        """Snapshot of (name, owner) pairs. For persistence, not an ABI method."""
        return iter(list(self._names.items()))

    def snapshot(self) -> Dict[NameKey, OwnerId]:
        return dict(self._names)

    def restore(self, names: Mapping[NameKey, OwnerId]) -> None:
        """Replace the mapping wholesale (journal rollback and state loading)."""
        self._names = dict(names)

    # ---- operations ---- #

    def resolve(self, name: BytesLike) -> OwnerId:
        """Return the owner of `name`, or the default owner if it is unregistered."""
        return self._names.get(self.coerce_name(name), self._default_owner)

    def register(self, name: BytesLike, caller: BytesLike) -> List[Event]:
        """
        Claim `name` for `caller`.

        Raises UsernameAlreadyExists if the name is taken. Returns the emitted
        events (a single Register).
        """
        key = self.coerce_name(name)
        who = self.coerce_owner(caller)
        if who == self._default_owner:
            raise InvalidInput(
                "caller must not be the default owner",
                field="caller",
                reason="caller_is_default",
            )
        if key in self._names:
            log.debug("register rejected: %s already exists", to_hex(key))
            raise UsernameAlreadyExists(name=to_hex(key))

        self._names[key] = who
        log.info("registered %s -> %s", to_hex(key), to_hex(who))
        return [Register(name=key, from_=who)]

    def rename(self, old_name: BytesLike, new_name: BytesLike, caller: BytesLike) -> List[Event]:
        """
        Move `old_name` to `new_name`, keeping `caller` as owner.

        Raises CallerIsNotOwner unless `caller` owns `old_name`. An unregistered
        `old_name` resolves to the default owner and so always fails this check,
        as does a caller equal to the default owner.
        Under the strict rename policy a `new_name` that is already registered
        (and is not `old_name`) raises UsernameAlreadyExists; under the
        permissive policy its owner is overwritten.
        """
        old = self.coerce_name(old_name)
        new = self.coerce_name(new_name)
        who = self.coerce_owner(caller)

        # The sentinel never owns anything, even though it is what absent keys resolve to.
        if who == self._default_owner or self.resolve(old) != who:
            log.debug("rename rejected: %s not owned by %s", to_hex(old), to_hex(who))
            raise CallerIsNotOwner(name=to_hex(old), caller=to_hex(who))

        if new != old and new in self._names:
            if self.rename_policy is RenamePolicy.STRICT:
                log.debug("rename rejected: target %s already exists", to_hex(new))
                raise UsernameAlreadyExists(name=to_hex(new))
            log.warning(
                "rename overwrites %s (owner %s) for %s",
                to_hex(new),
                to_hex(self._names[new]),
                to_hex(who),
            )

        del self._names[old]
        self._names[new] = who
        log.info("renamed %s -> %s for %s", to_hex(old), to_hex(new), to_hex(who))
        return [EditUsername(old_name=old, new_name=new, from_=who)]


__all__ = ["Registry"]
