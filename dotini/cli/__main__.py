from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import List, Optional

import typer
import yaml

from ..core.config import Config
from ..core.environment import Environment
from ..core.errors import DotiniError

app = typer.Typer(help="dotini CLI: inspect materialized INI configuration")


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging")):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _env(
    name: str,
    paths: Optional[List[Path]] = None,
    manifest: Optional[Path] = None,
    mode: str = "raw",
) -> Environment:
    try:
        e = Environment(name, config_path=manifest)
        for p in paths or []:
            e.register_source(p, mode=mode)
    except (DotiniError, ValueError) as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1)
    return e


def _config(e: Environment):
    try:
        return e.get_config()
    except DotiniError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1)


@app.command()
def dump(
    paths: List[Path] = typer.Argument(None, help="INI files, later ones override earlier ones"),
    env: str = typer.Option("default", "--env"),
    manifest: Optional[Path] = typer.Option(None, "--manifest", help="Path to dotini.yaml"),
    mode: str = typer.Option("raw", "--mode", help="raw or normal (expand constants)"),
    fmt: str = typer.Option("json", "--format", help="json or yaml"),
):
    cfg = _config(_env(env, paths, manifest, mode))
    tree = cfg.to_dict()
    if fmt == "yaml":
        typer.echo(yaml.safe_dump(tree, sort_keys=False).rstrip())
    elif fmt == "json":
        typer.echo(json.dumps(tree, indent=2))
    else:
        typer.echo(f"Error: unknown format {fmt!r}", err=True)
        raise typer.Exit(code=2)


@app.command()
def get(
    key: str,
    paths: List[Path] = typer.Argument(None),
    env: str = typer.Option("default", "--env"),
    manifest: Optional[Path] = typer.Option(None, "--manifest"),
    mode: str = typer.Option("raw", "--mode"),
):
    cfg = _config(_env(env, paths, manifest, mode))
    value = cfg.get(key)
    if isinstance(value, Config):
        value = value.to_dict()
    prov = cfg.provenance(key)
    typer.echo(json.dumps({"key": key, "value": value, "source": prov.source_id if prov else None}, indent=2))


@app.command("sources-list")
def sources_list(
    env: str = typer.Option("default", "--env"),
    manifest: Optional[Path] = typer.Option(None, "--manifest"),
):
    e = _env(env, manifest=manifest)
    typer.echo(json.dumps([
        {
            "id": rs.source.id,
            "name": rs.source.name,
            "filter": rs.filter.include_regex.pattern if rs.filter and rs.filter.include_regex else None,
        }
        for rs in e.sources
    ], indent=2))


if __name__ == "__main__":
    app()
