# -*- coding: utf-8 -*-
"""
human_dns.tests.conftest
========================

Pytest fixtures for the registry, host, codec and CLI tests.

- Deterministic 32-byte account ids derived by SHA3 from a tag, so tests never
  depend on randomness.
- Every test starts from a clean configuration: HUMAN_DNS_* variables are
  removed and the cached config is dropped.

Usage (inside a test file):
    def test_flow(registry, accounts):
        alice = accounts["alice"]
        registry.register(key, alice)
        assert registry.resolve(key) == alice
"""
from __future__ import annotations

import hashlib
import os
from typing import Dict

import pytest

from human_dns.config import RegistryConfig, RenamePolicy, load_config
from human_dns.host import Host
from human_dns.registry import Registry


def _det_account(tag: str) -> bytes:
    """Stable 32-byte account id from a tag."""
    return hashlib.sha3_256(("addr:" + tag).encode("utf-8")).digest()


@pytest.fixture(autouse=True)
def _clean_config(monkeypatch):
    for k in list(os.environ):
        if k.startswith("HUMAN_DNS_"):
            monkeypatch.delenv(k, raising=False)
    load_config.cache_clear()
    yield
    load_config.cache_clear()


@pytest.fixture(scope="session")
def accounts() -> Dict[str, bytes]:
    return {tag: _det_account(tag) for tag in ("alice", "bob", "carol")}


@pytest.fixture()
def strict_config() -> RegistryConfig:
    return RegistryConfig(rename_policy=RenamePolicy.STRICT)


@pytest.fixture()
def permissive_config() -> RegistryConfig:
    return RegistryConfig(rename_policy=RenamePolicy.PERMISSIVE)


@pytest.fixture()
def registry(strict_config) -> Registry:
    return Registry(strict_config)


@pytest.fixture()
def permissive_registry(permissive_config) -> Registry:
    return Registry(permissive_config)


@pytest.fixture()
def host(strict_config) -> Host:
    return Host(config=strict_config)
