"""
human_dns.store — file-backed persistence of registry state.

The file holds exactly the bytes produced by human_dns.codec.encode_state.
Writes go to a sibling temp file first and are moved into place with
os.replace, so a reader never observes a half-written state.

Processes sharing a state file serialize their calls with `transaction()`,
which holds an exclusive flock on a sibling `<state>.lock` file from load
until the caller is done saving.
"""

from __future__ import annotations

import fcntl
import logging
import os
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional, Union

from .codec import decode_state, encode_state
from .config import RegistryConfig, load_config
from .registry import Registry

log = logging.getLogger(__name__)


class StateStore:
    def __init__(self, path: Union[str, Path], *, config: Optional[RegistryConfig] = None) -> None:
        self.path = Path(path)
        self.config = config or load_config()

    @property
    def lock_path(self) -> Path:
        return self.path.with_name(self.path.name + ".lock")

    def exists(self) -> bool:
        return self.path.is_file()

    def load(self) -> Registry:
        """Load the stored registry, or a fresh empty one if nothing is stored yet."""
        if not self.exists():
            log.debug("no state at %s; starting empty", self.path)
            return Registry(self.config)
        return decode_state(self.path.read_bytes(), config=self.config)

    @contextmanager
    def transaction(self) -> Iterator[Registry]:
        """
        Hold the state lock and yield the freshly loaded registry.

        Whatever the caller saves inside the block is what the next
        transaction loads; a second transaction on the same file (from this
        or another process) blocks until this one exits.
        """
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.lock_path, "a+b") as lock:
            fcntl.flock(lock.fileno(), fcntl.LOCK_EX)
            try:
                yield self.load()
            finally:
                fcntl.flock(lock.fileno(), fcntl.LOCK_UN)

    def save(self, registry: Registry) -> None:
        data = encode_state(registry)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(prefix=self.path.name + ".", suffix=".tmp", dir=str(self.path.parent))
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp, self.path)
        except BaseException:
            if os.path.exists(tmp):
                os.unlink(tmp)
            raise
        log.debug("saved %d name(s) to %s", len(registry), self.path)


__all__ = ["StateStore"]
