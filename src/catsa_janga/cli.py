# src/catsa_janga/cli.py
"""catsa-janga Command Line Interface.

Inspection tools for checkpoint files written by CheckpointStore.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Literal

import typer
from pydantic import ValidationError

from catsa_janga import __version__
from catsa_janga.contracts import CheckpointState
from catsa_janga.core.checkpoint import CheckpointProbe, JsonSnapshotCodec, probe_checkpoint
from catsa_janga.core.config import CatsaSettings, load_settings
from catsa_janga.core.logging import configure_logging

__all__ = ["app"]

app = typer.Typer(
    name="catsa-janga",
    help="catsa-janga: inspect progress checkpoints of long-running processes.",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"catsa-janga version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """catsa-janga: inspect progress checkpoints of long-running processes."""


def _load_settings_or_exit(settings: str) -> CatsaSettings:
    settings_path = Path(settings).expanduser()
    try:
        return load_settings(settings_path)
    except FileNotFoundError:
        typer.secho(f"Error: Settings file not found: {settings}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1) from None
    except ValidationError as e:
        typer.secho("Settings validation failed:", fg=typer.colors.RED, err=True)
        for error in e.errors():
            loc = ".".join(str(x) for x in error["loc"])
            typer.secho(f"  - {loc}: {error['msg']}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1) from None


def _probe(path: Path | None, settings: str | None) -> CheckpointProbe:
    """Probe the checkpoint named on the command line or in the settings file."""
    if settings is None:
        if path is None:
            typer.secho("Error: Provide a checkpoint PATH or --settings.", fg=typer.colors.RED, err=True)
            raise typer.Exit(2)
        return probe_checkpoint(path)

    config = _load_settings_or_exit(settings)
    configure_logging(config.logging)
    checkpoint = config.checkpoint
    return probe_checkpoint(
        path if path is not None else checkpoint.path,
        JsonSnapshotCodec(indent=checkpoint.indent),
        encoding=checkpoint.encoding,
    )


@app.command()
def check(
    path: Path | None = typer.Argument(None, help="Checkpoint file to inspect."),
    settings: str | None = typer.Option(
        None,
        "--settings",
        "-s",
        help="Settings YAML file naming the checkpoint path.",
    ),
) -> None:
    """Report whether a checkpoint is absent, valid, corrupt or unreadable.

    Exits 0 only for a valid checkpoint.
    """
    probe = _probe(path, settings)

    if probe.state is CheckpointState.VALID:
        typer.secho(f"{probe.path}: {probe.state}", fg=typer.colors.GREEN)
        return

    message = f"{probe.path}: {probe.state}"
    if probe.error is not None:
        message += f" ({probe.error})"
    typer.secho(message, fg=typer.colors.YELLOW if probe.state is CheckpointState.ABSENT else typer.colors.RED)
    raise typer.Exit(1)


@app.command()
def show(
    path: Path | None = typer.Argument(None, help="Checkpoint file to print."),
    settings: str | None = typer.Option(
        None,
        "--settings",
        "-s",
        help="Settings YAML file naming the checkpoint path.",
    ),
    output_format: Literal["console", "json"] = typer.Option(
        "console",
        "--format",
        "-f",
        help="Output format: 'console' (indented) or 'json' (single line).",
    ),
) -> None:
    """Print the snapshot stored in a checkpoint."""
    probe = _probe(path, settings)

    if probe.state is not CheckpointState.VALID:
        detail = f": {probe.error}" if probe.error is not None else ""
        typer.secho(f"Error: checkpoint {probe.path} is {probe.state}{detail}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1)

    indent = 2 if output_format == "console" else None
    # datetimes restored by the codec print as ISO strings
    typer.echo(json.dumps(probe.data, indent=indent, ensure_ascii=False, default=str))


if __name__ == "__main__":
    app()
