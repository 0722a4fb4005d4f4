"""
human_dns.config — registry sizing, rename policy, state path and log level.

Configuration precedence:
  1) Environment variables (HUMAN_DNS_*)
  2) Config file named by HUMAN_DNS_CONFIG_FILE (.json, .yaml or .yml)
  3) Hardcoded defaults below

Key env vars:
  - HUMAN_DNS_NAME_LEN        (int)    default: 32   (bytes per name key)
  - HUMAN_DNS_OWNER_LEN       (int)    default: 32   (bytes per owner id)
  - HUMAN_DNS_RENAME_POLICY   (str)    default: strict   (strict|permissive)
  - HUMAN_DNS_STATE           (path)   default: human_dns_state.cbor
  - HUMAN_DNS_LOG_LEVEL       (str)    default: INFO
  - HUMAN_DNS_CONFIG_FILE     (path)   optional

Rename policy
-------------
`strict` rejects a rename onto a name key that is already registered (unless
it is the source key itself) with UsernameAlreadyExists. `permissive` lets the
rename overwrite the target's owner with the caller.

Usage:
    from human_dns.config import load_config
    CFG = load_config()
    if CFG.rename_policy is RenamePolicy.STRICT: ...
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, replace
from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Mapping

import yaml

from .errors import ConfigError

MIN_LEN = 1
MAX_LEN = 64
_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class RenamePolicy(str, Enum):
    STRICT = "strict"
    PERMISSIVE = "permissive"

    @classmethod
    def parse(cls, raw: Any) -> "RenamePolicy":
        if isinstance(raw, cls):
            return raw
        try:
            return cls(str(raw).strip().lower())
        except ValueError:
            raise ConfigError(
                f"rename_policy must be one of {[p.value for p in cls]}",
                details={"got": str(raw)},
            ) from None


@dataclass(frozen=True)
class RegistryConfig:
    name_len: int = 32
    owner_len: int = 32
    rename_policy: RenamePolicy = RenamePolicy.STRICT
    state_path: Path = Path("human_dns_state.cbor")
    log_level: str = "INFO"

    def validate(self) -> None:
        for name, v in (("name_len", self.name_len), ("owner_len", self.owner_len)):
            if not isinstance(v, int) or not (MIN_LEN <= v <= MAX_LEN):
                raise ConfigError(
                    f"{name} must be an int between {MIN_LEN} and {MAX_LEN}",
                    details={"got": v},
                )
        if not isinstance(self.rename_policy, RenamePolicy):
            raise ConfigError("rename_policy must be a RenamePolicy")
        if self.log_level.upper() not in _LOG_LEVELS:
            raise ConfigError(f"log_level must be one of {list(_LOG_LEVELS)}", details={"got": self.log_level})

    @property
    def default_owner(self) -> bytes:
        """The all-zero owner id returned for unregistered names."""
        return b"\x00" * self.owner_len

    def as_dict(self) -> Dict[str, Any]:
        return {
            "name_len": self.name_len,
            "owner_len": self.owner_len,
            "rename_policy": self.rename_policy.value,
            "state_path": str(self.state_path),
            "log_level": self.log_level,
        }


# ----------------------------- helpers ---------------------------------------


def _as_int(name: str, raw: Any) -> int:
    """Integers or integer strings (0x/0o/0b prefixes allowed); bools are rejected."""
    if isinstance(raw, int) and not isinstance(raw, bool):
        return raw
    if isinstance(raw, str):
        try:
            return int(raw.strip(), 0)
        except ValueError:
            pass
    raise ConfigError(f"{name} must be an integer", details={"got": str(raw)})


def _load_file(path: Path) -> Dict[str, Any]:
    if not path.is_file():
        raise ConfigError("config file not found", details={"path": str(path)})
    text = path.read_text(encoding="utf-8")
    try:
        if path.suffix.lower() in (".yaml", ".yml"):
            data = yaml.safe_load(text) or {}
        else:
            data = json.loads(text or "{}")
    except (ValueError, yaml.YAMLError) as e:
        raise ConfigError(
            "config file is not valid JSON/YAML",
            details={"path": str(path), "error": str(e)},
        ) from e
    if not isinstance(data, dict):
        raise ConfigError("config file must contain a mapping", details={"path": str(path)})
    return data


def _apply(cfg: RegistryConfig, values: Mapping[str, Any]) -> RegistryConfig:
    changes: Dict[str, Any] = {}
    for key in ("name_len", "owner_len"):
        if values.get(key) is not None:
            changes[key] = _as_int(key, values[key])
    if values.get("rename_policy") is not None:
        changes["rename_policy"] = RenamePolicy.parse(values["rename_policy"])
    if values.get("state_path") is not None:
        changes["state_path"] = Path(str(values["state_path"])).expanduser()
    if values.get("log_level") is not None:
        changes["log_level"] = str(values["log_level"]).upper()
    return replace(cfg, **changes) if changes else cfg


# ------------------------------- config --------------------------------------


@lru_cache(maxsize=1)
def load_config() -> RegistryConfig:
    """
    Build and cache a RegistryConfig from defaults, optional file, then env.
    """
    cfg = RegistryConfig()

    cfg_file = os.getenv("HUMAN_DNS_CONFIG_FILE")
    if cfg_file:
        cfg = _apply(cfg, _load_file(Path(cfg_file).expanduser()))

    cfg = _apply(
        cfg,
        {
            "name_len": os.getenv("HUMAN_DNS_NAME_LEN"),
            "owner_len": os.getenv("HUMAN_DNS_OWNER_LEN"),
            "rename_policy": os.getenv("HUMAN_DNS_RENAME_POLICY"),
            "state_path": os.getenv("HUMAN_DNS_STATE"),
            "log_level": os.getenv("HUMAN_DNS_LOG_LEVEL"),
        },
    )
    cfg.validate()
    return cfg


__all__ = ["RenamePolicy", "RegistryConfig", "load_config"]
