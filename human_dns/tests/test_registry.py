# -*- coding: utf-8 -*-
"""
Registry tests
- default owner for unknown names
- register uniqueness
- rename ownership gate and atomic move
- rename onto a taken name under both policies
- failed calls leave the mapping untouched
"""
from __future__ import annotations

import pytest

from human_dns.config import RegistryConfig, RenamePolicy
from human_dns.errors import CallerIsNotOwner, InvalidInput, UsernameAlreadyExists
from human_dns.events import EditUsername, Register
from human_dns.registry import Registry

K1 = b"\x01" * 32
K2 = b"\x02" * 32
K3 = b"\x03" * 32
K4 = b"\x04" * 32
ZERO = b"\x00" * 32


def test_default_works(registry):
    assert registry.default_owner == ZERO
    assert len(registry) == 0


def test_register_works(registry, accounts):
    alice = accounts["alice"]
    assert registry.register(K1, alice) == [Register(name=K1, from_=alice)]
    with pytest.raises(UsernameAlreadyExists):
        registry.register(K1, alice)


def test_edit_works(registry, accounts):
    alice = accounts["alice"]
    registry.register(K1, alice)

    assert registry.rename(K1, K2, alice) == [EditUsername(old_name=K1, new_name=K2, from_=alice)]
    assert registry.resolve(K2) == alice


def test_get_address_works(registry, accounts):
    alice = accounts["alice"]
    registry.register(K1, alice)
    assert registry.resolve(K1) == alice


# ----------------------- scenarios -----------------------


def test_scenario_walkthrough(registry, accounts):
    a, b = accounts["alice"], accounts["bob"]

    # 1. fresh registry resolves to the default owner
    assert registry.resolve(K1) == registry.default_owner

    # 2. A registers K1
    registry.register(K1, a)
    assert registry.resolve(K1) == a

    # 3. B cannot take K1
    with pytest.raises(UsernameAlreadyExists) as ei:
        registry.register(K1, b)
    assert ei.value.code == "UsernameAlreadyExists"
    assert registry.resolve(K1) == a

    # 4. A renames K1 -> K2
    registry.rename(K1, K2, a)
    assert registry.resolve(K1) == registry.default_owner
    assert registry.resolve(K2) == a

    # 5. B cannot rename the now-unregistered K1
    with pytest.raises(CallerIsNotOwner):
        registry.rename(K1, K3, b)
    assert registry.resolve(K3) == registry.default_owner


def test_scenario_rename_onto_own_name_strict(registry, accounts):
    a = accounts["alice"]
    registry.register(K2, a)
    registry.register(K4, a)

    with pytest.raises(UsernameAlreadyExists):
        registry.rename(K2, K4, a)

    assert registry.resolve(K2) == a
    assert registry.resolve(K4) == a
    assert len(registry) == 2


def test_scenario_rename_onto_own_name_permissive(permissive_registry, accounts):
    reg = permissive_registry
    a = accounts["alice"]
    reg.register(K2, a)
    reg.register(K4, a)

    events = reg.rename(K2, K4, a)

    assert events == [EditUsername(old_name=K2, new_name=K4, from_=a)]
    assert reg.resolve(K2) == reg.default_owner
    assert reg.resolve(K4) == a
    assert len(reg) == 1


def test_permissive_rename_overwrites_other_owner(permissive_registry, accounts):
    reg = permissive_registry
    a, b = accounts["alice"], accounts["bob"]
    reg.register(K1, a)
    reg.register(K2, b)

    reg.rename(K1, K2, a)

    assert reg.resolve(K2) == a
    assert reg.resolve(K1) == reg.default_owner


def test_strict_rename_onto_other_owner_rejected(registry, accounts):
    a, b = accounts["alice"], accounts["bob"]
    registry.register(K1, a)
    registry.register(K2, b)

    with pytest.raises(UsernameAlreadyExists):
        registry.rename(K1, K2, a)

    assert registry.resolve(K1) == a
    assert registry.resolve(K2) == b


# ----------------------- properties by example -----------------------


def test_ownership_gate(registry, accounts):
    a, b = accounts["alice"], accounts["bob"]
    registry.register(K1, a)
    before = registry.snapshot()

    with pytest.raises(CallerIsNotOwner) as ei:
        registry.rename(K1, K3, b)

    assert ei.value.details["caller"] == "0x" + b.hex()
    assert registry.snapshot() == before


@pytest.mark.parametrize("policy", list(RenamePolicy))
def test_degenerate_rename_to_same_name(policy, accounts):
    reg = Registry(RegistryConfig(rename_policy=policy))
    a = accounts["alice"]
    reg.register(K1, a)

    events = reg.rename(K1, K1, a)

    assert events == [EditUsername(old_name=K1, new_name=K1, from_=a)]
    assert reg.resolve(K1) == a
    assert len(reg) == 1


def test_default_caller_cannot_register(registry):
    with pytest.raises(InvalidInput) as ei:
        registry.register(K1, ZERO)
    assert ei.value.details["reason"] == "caller_is_default"
    assert K1 not in registry


def test_default_caller_cannot_rename_unregistered(registry):
    with pytest.raises(CallerIsNotOwner):
        registry.rename(K1, K2, ZERO)
    assert len(registry) == 0


@pytest.mark.parametrize(
    "bad",
    [b"", b"\x01" * 31, b"\x01" * 33, "0x123", "not-hex", 42],
)
def test_malformed_keys_rejected(registry, accounts, bad):
    with pytest.raises(InvalidInput):
        registry.register(bad, accounts["alice"])
    assert len(registry) == 0


def test_hex_keys_accepted(registry, accounts):
    a = accounts["alice"]
    registry.register("0x" + K1.hex(), "0x" + a.hex())
    assert registry.resolve(K1) == a
    assert registry.resolve(K1.hex()) == a


def test_custom_lengths():
    reg = Registry(RegistryConfig(name_len=4, owner_len=20))
    owner = b"\xaa" * 20
    assert reg.default_owner == b"\x00" * 20
    reg.register(b"abcd", owner)
    assert reg.resolve(b"abcd") == owner
    with pytest.raises(InvalidInput):
        reg.resolve(K1)
