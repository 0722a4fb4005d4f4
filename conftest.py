from __future__ import annotations

import os
from typing import Any, List, Optional

# Keep dict/set hash-iteration stable. (CI may override but local runs benefit.)
os.environ.setdefault("PYTHONHASHSEED", "0")
# Prefer UTC everywhere.
os.environ.setdefault("TZ", "UTC")


# --- pretty assertion diffs for bytes ----------------------------------------

def pytest_assertrepr_compare(op: str, left: Any, right: Any) -> Optional[List[str]]:
    if isinstance(left, (bytes, bytearray)) and isinstance(right, (bytes, bytearray)) and op == "==":
        def hexdump(b: bytes) -> str:
            return " ".join(f"{x:02x}" for x in b)
        return [
            "bytes differ:",
            f" left: {hexdump(bytes(left))}",
            f"right: {hexdump(bytes(right))}",
        ]
    return None
