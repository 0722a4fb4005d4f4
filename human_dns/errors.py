# human_dns/errors.py
"""
Error types for the Human DNS registry. These are lightweight, serializable,
and safe to surface in receipts/logs.

Domain errors (caller-correctable; the registry state is never touched):
- UsernameAlreadyExists
- CallerIsNotOwner

Ambient errors:
- InvalidInput   (malformed key/owner, sentinel caller)
- UnknownMethod  (host dispatch of a name not in the ABI)
- CodecError     (persisted state cannot be decoded)
- ConfigError    (invalid configuration)

Exports:
- HumanDnsError (base)
- the classes above
"""

from __future__ import annotations

import json
from typing import Any, Dict, Mapping, Optional


class HumanDnsError(Exception):
    """Base class for Human DNS errors."""

    code: str = "HDNS_ERROR"

    def __init__(self, message: str = "", *, details: Optional[Mapping[str, Any]] = None) -> None:
        self.message = message or self.__class__.__name__
        self.details = dict(details or {})
        super().__init__(self.__str__())

    def to_dict(self) -> Dict[str, Any]:
        return {"code": self.code, "message": self.message, "details": self.details}

    def __str__(self) -> str:  # pragma: no cover - trivial
        if self.details:
            # Keep this compact and stable for logs
            try:
                packed = json.dumps(self.details, sort_keys=True, separators=(",", ":"))
            except (TypeError, ValueError):
                packed = str(self.details)
            return f"{self.code}: {self.message} [{packed}]"
        return f"{self.code}: {self.message}"


class UsernameAlreadyExists(HumanDnsError):
    """
    The requested name key is already present. Raised by `register`, and by
    `rename` under the strict rename policy when the target key is taken.
    """
    code = "UsernameAlreadyExists"

    def __init__(
        self,
        *,
        name: str,
        message: str = "username already exists",
        details: Optional[Mapping[str, Any]] = None,
    ) -> None:
        d = dict(details or {})
        d["name"] = name
        super().__init__(message, details=d)


class CallerIsNotOwner(HumanDnsError):
    """The caller does not own the source name of a rename (or it is unregistered)."""
    code = "CallerIsNotOwner"

    def __init__(
        self,
        *,
        name: str,
        caller: str,
        message: str = "caller is not owner",
        details: Optional[Mapping[str, Any]] = None,
    ) -> None:
        d = dict(details or {})
        d.update({"name": name, "caller": caller})
        super().__init__(message, details=d)


class InvalidInput(HumanDnsError):
    """A key, owner id or hex string failed type/length validation."""
    code = "InvalidInput"

    def __init__(
        self,
        message: str = "invalid input",
        *,
        field: Optional[str] = None,
        reason: Optional[str] = None,
        details: Optional[Mapping[str, Any]] = None,
    ) -> None:
        d = dict(details or {})
        if field is not None:
            d["field"] = field
        if reason is not None:
            d["reason"] = reason
        super().__init__(message, details=d)


class UnknownMethod(HumanDnsError):
    code = "UnknownMethod"

    def __init__(self, method: str, *, details: Optional[Mapping[str, Any]] = None) -> None:
        d = dict(details or {})
        d["method"] = method
        super().__init__(f"unknown method {method!r}", details=d)


class CodecError(HumanDnsError):
    """Persisted registry state is malformed or has an unsupported version."""
    code = "CodecError"


class ConfigError(HumanDnsError):
    code = "ConfigError"


__all__ = [
    "HumanDnsError",
    "UsernameAlreadyExists",
    "CallerIsNotOwner",
    "InvalidInput",
    "UnknownMethod",
    "CodecError",
    "ConfigError",
]
