#!/usr/bin/env python3
"""
human_dns.cli
=============

Operate a file-backed Human DNS registry from the shell. Each mutating
command takes the state lock, loads the state file, runs one call through the
Host and saves the state only if the call succeeded.

Usage
-----
    human-dns init
    human-dns register 0x0101…01 --caller 0xaa…aa
    human-dns register alice --label --caller 0xaa…aa
    human-dns rename alice alice2 --label --caller 0xaa…aa
    human-dns resolve alice2 --label
    human-dns show
    human-dns config

Names are hex name keys unless --label is given, in which case each NAME is a
username hashed client-side with BLAKE2b to a name key.

Exit codes: 0 success, 1 call failed (receipt ok=false), 2 bad input/state.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import typer
from rich import box
from rich.console import Console
from rich.table import Table

from .config import RegistryConfig, load_config
from .errors import HumanDnsError, InvalidInput
from .host import Host, Receipt
from .store import StateStore
from .types import hash_label, to_hex
from .version import __version__

app = typer.Typer(
    name="human-dns",
    add_completion=False,
    no_args_is_help=True,
    help="Register and resolve hashed usernames in a local Human DNS registry.",
)

_console = Console()


# ----------------- helpers -----------------


def _cfg(ctx: typer.Context) -> RegistryConfig:
    return ctx.obj["config"]


def _store(ctx: typer.Context) -> StateStore:
    return StateStore(ctx.obj["state"], config=_cfg(ctx))


def _key(ctx: typer.Context, raw: str, label: bool) -> str:
    if label:
        return to_hex(hash_label(raw, _cfg(ctx).name_len))
    return raw


def _print_json(obj: Dict[str, Any]) -> None:
    typer.echo(json.dumps(obj, indent=2, sort_keys=True))


def _load_host(ctx: typer.Context) -> Host:
    try:
        return Host(_store(ctx).load())
    except HumanDnsError as e:
        _print_json({"ok": False, "error": e.to_dict()})
        raise typer.Exit(code=2)


def _report(receipt: Receipt) -> None:
    _print_json(receipt.to_dict())
    if not receipt.ok:
        raise typer.Exit(code=2 if isinstance(receipt.error, InvalidInput) else 1)


def _transact(ctx: typer.Context, method: str, *args: str, caller: str) -> None:
    # load -> call -> save under the state lock so concurrent runs serialize.
    store = _store(ctx)
    try:
        with store.transaction() as registry:
            host = Host(registry)
            receipt = host.call(method, *args, caller=caller)
            if receipt.ok and receipt.events:
                store.save(host.registry)
    except HumanDnsError as e:
        _print_json({"ok": False, "error": e.to_dict()})
        raise typer.Exit(code=2)
    _report(receipt)


# ----------------- commands -----------------


@app.callback()
def main(
    ctx: typer.Context,
    state: Optional[Path] = typer.Option(None, "--state", "-s", help="State file (default from config)."),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Logging level, e.g. DEBUG."),
) -> None:
    try:
        cfg = load_config()
    except HumanDnsError as e:
        _print_json({"ok": False, "error": e.to_dict()})
        raise typer.Exit(code=2)

    if not logging.getLogger().handlers:
        level = (log_level or cfg.log_level).upper()
        logging.basicConfig(
            level=getattr(logging, level, logging.INFO),
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
    ctx.obj = {"config": cfg, "state": state or cfg.state_path}


@app.command()
def init(ctx: typer.Context, force: bool = typer.Option(False, "--force", help="Overwrite existing state.")) -> None:
    """Create an empty registry state file."""
    store = _store(ctx)
    if store.exists() and not force:
        typer.echo(f"state already exists at {store.path} (use --force)", err=True)
        raise typer.Exit(code=2)
    host = Host(config=_cfg(ctx))
    store.save(host.registry)
    _print_json({"ok": True, "state": str(store.path), "default_owner": to_hex(host.registry.default_owner)})


@app.command()
def resolve(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Name key (hex) or label with --label."),
    label: bool = typer.Option(False, "--label", help="Hash NAME as a username."),
) -> None:
    """Print the owner of NAME (the default owner if unregistered)."""
    host = _load_host(ctx)
    _report(host.call("resolve", _key(ctx, name, label)))


@app.command()
def register(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Name key (hex) or label with --label."),
    caller: str = typer.Option(..., "--caller", "-c", help="Caller account id (hex)."),
    label: bool = typer.Option(False, "--label", help="Hash NAME as a username."),
) -> None:
    """Claim NAME for CALLER."""
    _transact(ctx, "register", _key(ctx, name, label), caller=caller)


@app.command()
def rename(
    ctx: typer.Context,
    old: str = typer.Argument(..., help="Current name key (hex) or label."),
    new: str = typer.Argument(..., help="New name key (hex) or label."),
    caller: str = typer.Option(..., "--caller", "-c", help="Caller account id (hex)."),
    label: bool = typer.Option(False, "--label", help="Hash OLD and NEW as usernames."),
) -> None:
    """Rename OLD to NEW; CALLER must own OLD."""
    _transact(ctx, "rename", _key(ctx, old, label), _key(ctx, new, label), caller=caller)


@app.command()
def show(ctx: typer.Context, as_json: bool = typer.Option(False, "--json", help="Emit JSON.")) -> None:
    """List every registered name and its owner."""
    host = _load_host(ctx)
    rows = sorted((to_hex(k), to_hex(v)) for k, v in host.registry.items())
    if as_json:
        _print_json({"default_owner": to_hex(host.registry.default_owner), "names": dict(rows)})
        return
    table = Table(title=f"human-dns {__version__}", box=box.SIMPLE)
    table.add_column("name")
    table.add_column("owner")
    for k, v in rows:
        table.add_row(k, v)
    _console.print(table)


@app.command("config")
def show_config(ctx: typer.Context) -> None:
    """Print the effective configuration."""
    out = _cfg(ctx).as_dict()
    out["state_path"] = str(ctx.obj["state"])
    _print_json(out)


def run() -> None:
    app()


if __name__ == "__main__":
    run()
