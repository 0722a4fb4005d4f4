"""
human_dns.abi — static ABI manifest for the registry.

Shape follows the VM package manifests ({"name", "version", "abi": {"functions",
"events", "errors"}}). `mutates` marks functions that need a caller and run
inside a journal. `aliases` keeps the message names used by existing clients
(`get_address`, `edit_username`) callable.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping

from .errors import UnknownMethod

MANIFEST: Dict[str, Any] = {
    "name": "HumanDns",
    "version": "0.1.0",
    "abi": {
        "functions": [
            {
                "name": "resolve",
                "inputs": [{"name": "name", "type": "bytes32"}],
                "outputs": [{"type": "address"}],
                "mutates": False,
            },
            {
                "name": "register",
                "inputs": [{"name": "name", "type": "bytes32"}],
                "outputs": [],
                "mutates": True,
            },
            {
                "name": "rename",
                "inputs": [
                    {"name": "old_name", "type": "bytes32"},
                    {"name": "new_name", "type": "bytes32"},
                ],
                "outputs": [],
                "mutates": True,
            },
        ],
        "events": [
            {
                "name": "Register",
                "inputs": [
                    {"name": "name", "type": "bytes32", "indexed": True},
                    {"name": "from", "type": "address", "indexed": True},
                ],
            },
            {
                "name": "EditUsername",
                "inputs": [
                    {"name": "old_name", "type": "bytes32", "indexed": True},
                    {"name": "new_name", "type": "bytes32", "indexed": True},
                    {"name": "from", "type": "address", "indexed": True},
                ],
            },
        ],
        "errors": [
            {"name": "UsernameAlreadyExists"},
            {"name": "CallerIsNotOwner"},
        ],
    },
    "aliases": {
        "get_address": "resolve",
        "edit_username": "rename",
    },
}


def functions() -> Dict[str, Mapping[str, Any]]:
    return {f["name"]: f for f in MANIFEST["abi"]["functions"]}


def resolve_method(name: str) -> Mapping[str, Any]:
    """Map a method name (or alias) to its ABI function entry."""
    canonical = MANIFEST["aliases"].get(name, name)
    fn = functions().get(canonical)
    if fn is None:
        raise UnknownMethod(name)
    return fn


__all__ = ["MANIFEST", "functions", "resolve_method"]
