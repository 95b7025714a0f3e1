"""
CLI: ``dbspine`` — render instance manifests from the command line.

Usage::

    dbspine render orcl1.yaml                          # GCP defaults, print to stdout
    dbspine render orcl1.yaml --config config.yaml     # with a GlobalConfig override
    dbspine render orcl1.yaml --restore bkp-20240101   # restore every disk from a backup
    dbspine render orcl1.yaml --exposure node -o out.yaml

    dbspine platforms                                  # platform default table
    dbspine status orcl1.yaml --address 10.0.0.7       # ask the control agent
"""

from __future__ import annotations

import json
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from dbspine.core.errors import DbSpineError

app = typer.Typer(
    name="dbspine",
    help="dbspine — declarative manifest synthesis for database instances.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)
console = Console()
err_console = Console(stderr=True)


def _version_callback(value: bool) -> None:
    if value:
        from dbspine import __version__

        typer.echo(f"dbspine {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """dbspine CLI — render manifests, inspect platforms, check instance status."""


def _fail(exc: DbSpineError) -> None:
    err_console.print(f"[bold red]Error[/bold red] ({exc.category.value}): {escape(exc.message)}")
    raise typer.Exit(code=1)


# ── Render ───────────────────────────────────────────────────────────────


@app.command()
def render(
    instance_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Instance YAML."),
    config_file: Path | None = typer.Option(
        None, "--config", "-c", exists=True, dir_okay=False, help="GlobalConfig YAML.",
    ),
    restore: str | None = typer.Option(None, "--restore", "-r", help="Backup id to restore from."),
    exposure: str | None = typer.Option(
        None, "--exposure", "-e", help="Primary Service exposure: lb or node.",
    ),
    uid: str | None = typer.Option(
        None, "--uid", help="Owner uid, for instance files without metadata.uid.",
    ),
    output: Path | None = typer.Option(None, "--output", "-o", help="Write manifests to a file."),
) -> None:
    """Render every manifest of an instance as multi-document YAML.

    Every resource is owned by the instance, so the document must carry
    ``metadata.uid`` (as exported from the cluster) or ``--uid`` must be given.
    """
    from dbspine.core.logging import configure_logging
    from dbspine.core.settings import EngineSettings
    from dbspine.manifests.engine import render_manifests, synthesize, write_manifests
    from dbspine.manifests.models import BuildParameters, GlobalConfig, Instance, RestoreRequest

    settings = EngineSettings.from_env()
    configure_logging(level=settings.log_level, json_format=settings.log_json)

    mode = exposure or settings.exposure
    if mode not in ("lb", "node"):
        err_console.print(f"[bold red]Error[/bold red]: unknown exposure {mode!r} (use lb or node)")
        raise typer.Exit(code=2)

    try:
        instance = Instance.from_yaml(instance_file)
        if uid:
            instance = instance.model_copy(update={"uid": uid})
        config = GlobalConfig.from_yaml(config_file) if config_file else None
        params = BuildParameters(
            instance=instance,
            config=config,
            images=settings.images(),
            restore=RestoreRequest(backup_id=restore) if restore else None,
            privilege_escalation=settings.privilege_escalation,
        )
        content = render_manifests(synthesize(params, mode))
    except DbSpineError as exc:
        _fail(exc)
        return

    if output:
        path = write_manifests(content, output)
        err_console.print(f"[green]✓[/green] wrote {path}")
    else:
        typer.echo(content, nl=False)


# ── Platforms ────────────────────────────────────────────────────────────


@app.command()
def platforms(
    json_out: bool = typer.Option(False, "--json", help="Output as JSON."),
) -> None:
    """List supported platforms and their storage defaults."""
    from dbspine.manifests.platforms import DEFAULT_PLATFORM, PLATFORMS, HOSTPATH_PLATFORMS

    if json_out:
        out = {
            name: {
                "storage_class": profile.storage_class,
                "volume_snapshot_class": profile.volume_snapshot_class,
                "default": name == DEFAULT_PLATFORM.value,
            }
            for name, profile in PLATFORMS.items()
        }
        typer.echo(json.dumps(out, indent=2))
        return

    table = Table(title="Platforms")
    table.add_column("Name", style="bold cyan")
    table.add_column("Storage class")
    table.add_column("Snapshot class")
    table.add_column("Notes")

    for name, profile in PLATFORMS.items():
        notes = []
        if name == DEFAULT_PLATFORM.value:
            notes.append("default")
        if name in HOSTPATH_PLATFORMS:
            notes.append("hostpath")
        table.add_row(name, profile.storage_class, profile.volume_snapshot_class, ", ".join(notes))

    console.print(table)


# ── Status ───────────────────────────────────────────────────────────────


@app.command()
def status(
    instance_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Instance YAML."),
    address: str = typer.Option(..., "--address", "-a", help="Agent Service address."),
    timeout: float | None = typer.Option(None, "--timeout", "-t", help="Deadline in seconds."),
) -> None:
    """Ask the instance's control agent for its status."""
    from dbspine.core.logging import configure_logging
    from dbspine.core.settings import EngineSettings
    from dbspine.manifests import status as status_check
    from dbspine.manifests.models import Instance

    settings = EngineSettings.from_env()
    configure_logging(level=settings.log_level, json_format=settings.log_json)

    try:
        instance = Instance.from_yaml(instance_file)
        result = status_check.check_instance_status(
            instance.name,
            instance.cdb_name,
            address,
            instance.effective_db_domain(),
            timeout=timeout or settings.status_check_timeout_seconds,
        )
    except DbSpineError as exc:
        _fail(exc)
        return

    typer.echo(result)
