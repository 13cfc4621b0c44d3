"""CLI entry point for Digistructor."""

from __future__ import annotations

import json
import logging
from contextlib import closing
from pathlib import Path
from typing import Annotated

import typer
import yaml
from rich import print as rprint
from rich.syntax import Syntax
from rich.table import Table

from digistructor_core.config import DigistructorConfig, load_config
from digistructor_core.config.loader import DEFAULT_CONFIG_TEMPLATE
from digistructor_core.digest import from_hex, get_digest_function, to_hex
from digistructor_core.errors import DigistructorError
from digistructor_core.graph import NodeStore, TreeBuilder
from digistructor_core.hydration import Loader
from digistructor_core.interfaces import BackingPlugin
from digistructor_core.plugins import PluginLoader

app = typer.Typer(
    name="digistructor",
    help="Content-addressed storage with verified reconstruction.",
)

config_app = typer.Typer(help="Manage Digistructor configuration.")
app.add_typer(config_app, name="config")

# Global state
_config: DigistructorConfig | None = None

_LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}


class _JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        return json.dumps({
            "time": self.formatTime(record),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
        })


def _configure_logging(cfg: DigistructorConfig) -> None:
    handler = logging.StreamHandler()
    if cfg.log_format == "json":
        handler.setFormatter(_JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    logging.basicConfig(level=_LOG_LEVELS[cfg.log_level], handlers=[handler], force=True)


def _get_config() -> DigistructorConfig:
    if _config is None:
        return load_config()
    return _config


@app.callback()
def main(
    config: Annotated[
        str | None, typer.Option("--config", "-c", help="Path to digistructor.yaml")
    ] = None,
) -> None:
    """Global options."""
    global _config
    _config = load_config(config)
    _configure_logging(_config)


def _open_backing(cfg: DigistructorConfig) -> BackingPlugin:
    return PluginLoader(cfg).open_backing()


def _parse_digest(value: str) -> bytes:
    try:
        return from_hex(value)
    except ValueError as e:
        raise typer.BadParameter(str(e)) from e


def _fail(err: Exception) -> None:
    rprint(f"[red]Error:[/red] {err}")
    raise typer.Exit(1)


@app.command()
def put(
    file: Annotated[Path, typer.Argument(help="File to store", exists=True, dir_okay=False)],
    chunk_size: Annotated[
        int | None, typer.Option("--chunk-size", min=1, help="Leaf size in bytes")
    ] = None,
) -> None:
    """Chunk a file into leaves and edges and persist them. Prints the root digest."""
    cfg = _get_config()
    builder = TreeBuilder(
        chunk_size=chunk_size or cfg.builder.chunk_size,
        digest_fn=get_digest_function(cfg.digest.algorithm),
    )
    result = builder.build(file.read_bytes())

    try:
        with closing(_open_backing(cfg)) as backing:
            if backing.has(result.root):
                rprint("[dim]Root already present; adding any missing nodes.[/dim]")
            backing.put_nodes(result.nodes)
    except DigistructorError as e:
        _fail(e)

    rprint(
        f"[green]Stored[/green] {result.size} bytes as "
        f"{len(result.leaves)} leaf/leaves and {len(result.edges)} edge(s)."
    )
    typer.echo(to_hex(result.root))


def _loader(cfg: DigistructorConfig, backing: BackingPlugin) -> Loader:
    return Loader(backing, store_factory=lambda: NodeStore.from_config(cfg))


@app.command()
def get(
    digest: Annotated[str, typer.Argument(help="Hex digest to reconstruct")],
    output: Annotated[
        Path | None, typer.Option("--output", "-o", help="Write bytes here instead of stdout")
    ] = None,
) -> None:
    """Reconstruct verified bytes for a digest."""
    cfg = _get_config()
    want = _parse_digest(digest)
    try:
        with closing(_open_backing(cfg)) as backing:
            data = _loader(cfg, backing).load(want)
    except DigistructorError as e:
        _fail(e)

    if output is None:
        typer.echo(data, nl=False)
    else:
        output.write_bytes(data)
        rprint(f"[green]Wrote[/green] {len(data)} bytes to {output}")


@app.command()
def verify(
    digest: Annotated[str, typer.Argument(help="Hex digest to verify")],
) -> None:
    """Hydrate and verify a digest without printing its content."""
    cfg = _get_config()
    want = _parse_digest(digest)
    try:
        with closing(_open_backing(cfg)) as backing:
            hydrated = _loader(cfg, backing).hydrate(want)
        data = hydrated.store.get(want)
    except DigistructorError as e:
        _fail(e)

    rprint(
        f"[green]OK[/green] {len(data)} bytes verified "
        f"({hydrated.edges} edge(s), {hydrated.leaves} leaf/leaves loaded)"
    )


@app.command()
def stats() -> None:
    """Show row counts for the backing store."""
    cfg = _get_config()
    try:
        with closing(_open_backing(cfg)) as backing:
            counts = backing.stats()
    except DigistructorError as e:
        _fail(e)

    table = Table(title="Backing Store")
    table.add_column("relation", style="cyan")
    table.add_column("rows", justify="right", style="green")
    for relation, count in counts.items():
        table.add_row(relation, str(count))

    rprint(table)


@config_app.command("show")
def config_show() -> None:
    """Show current resolved configuration."""
    cfg = _get_config()
    rprint(Syntax(yaml.dump(cfg.model_dump(), default_flow_style=False), "yaml"))


@config_app.command("init")
def config_init(
    force: bool = typer.Option(False, "--force", help="Overwrite existing config"),
) -> None:
    """Create default digistructor.yaml in current directory."""
    target = Path("digistructor.yaml")
    if target.exists() and not force:
        rprint("[yellow]digistructor.yaml already exists.[/yellow] Use --force to overwrite.")
        raise typer.Exit(1)
    target.write_text(DEFAULT_CONFIG_TEMPLATE)
    rprint(f"[green]Created[/green] {target}")


if __name__ == "__main__":
    app()
