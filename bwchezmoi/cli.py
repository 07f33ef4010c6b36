"""Command-line interface for bwchezmoi."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Any

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from bwchezmoi import __version__
from bwchezmoi.config import (
    Settings,
    get_config_dir,
    load_settings,
    write_default_settings,
)
from bwchezmoi.exceptions import BwChezmoiError
from bwchezmoi.formats import FORMAT_REGISTRY
from bwchezmoi.models import ClassificationResult
from bwchezmoi.naming import CollisionPolicy, generate_name
from bwchezmoi.organizer import Organizer
from bwchezmoi.templates import emit_config_template
from bwchezmoi.vault import BitwardenClient

console = Console()

# (item name, domain) pairs used by the example templates written by `init`
EXAMPLE_ITEMS: list[tuple[str, str]] = [
    ("OpenAI API Key", "openai.com"),
    ("Anthropic API Key", "anthropic.com"),
]


def _settings(ctx: click.Context) -> Settings:
    return ctx.obj["settings"]


def _get_client(ctx: click.Context) -> BitwardenClient:
    """Build a vault client with a usable session.

    Falls back to ``bw unlock --raw`` when no session token was given.
    """
    settings = _settings(ctx)
    client = BitwardenClient(
        session=ctx.obj["session"],
        command=settings.bw_command,
        timeout=settings.timeout,
    )
    client.check_login()
    if not client.session:
        client = client.with_session(client.unlock())
    return client


def _result_row(result: ClassificationResult, preview_length: int) -> dict[str, Any]:
    return {
        "id": result.item_id,
        "name": result.item_name,
        "status": result.status.value,
        "field": result.field.describe() if result.field else None,
        "domain": result.domain or None,
        "preview": result.preview(preview_length) if result.matched else None,
    }


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--config-dir",
    "-d",
    type=click.Path(),
    help="Config directory (uses default if not specified)",
)
@click.option(
    "--session",
    envvar="BW_SESSION",
    help="Bitwarden session token (defaults to $BW_SESSION)",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(
    ctx: click.Context, config_dir: str | None, session: str | None, verbose: bool
) -> None:
    """bwchezmoi - Turn Bitwarden API keys into chezmoi templates."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
        force=True,
    )
    try:
        settings = load_settings(config_dir)
    except BwChezmoiError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        sys.exit(1)

    ctx.obj = {"config_dir": config_dir, "session": session, "settings": settings}


@main.command(name="check")
@click.pass_context
def check_command(ctx: click.Context) -> None:
    """Check that bw is logged in and a session is available."""
    try:
        settings = _settings(ctx)
        client = BitwardenClient(
            session=ctx.obj["session"],
            command=settings.bw_command,
            timeout=settings.timeout,
        )
        client.check_login()
        console.print("[green]✓[/green] Logged in to Bitwarden")

        if client.session:
            console.print("[green]✓[/green] Session token provided")
        else:
            console.print(
                "[yellow]Warning:[/yellow] No session token. "
                "Run 'export BW_SESSION=$(bw unlock --raw)'"
            )
    except BwChezmoiError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        sys.exit(1)


@main.command(name="scan")
@click.option(
    "--output", "-o", default="table", help="Output format (table/json/plain)"
)
@click.pass_context
def scan_command(ctx: click.Context, output: str) -> None:
    """Scan vault items for values that look like API keys.

    Nothing is written to disk. Values are shown truncated.
    """
    try:
        settings = _settings(ctx)
        report = Organizer(_get_client(ctx), settings).scan()
    except BwChezmoiError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        sys.exit(1)

    interesting = [r for r in report.results if r.matched or r.suspected]

    if output == "json":
        rows = [_result_row(r, settings.preview_length) for r in interesting]
        click.echo(json.dumps(rows, indent=2))
        return

    if output == "plain":
        for result in interesting:
            mark = "✓" if result.matched else "?"
            detail = result.field.describe() if result.field else "no key pattern"
            click.echo(f"{mark} {result.item_name}\t{detail}\t{result.domain}")
    else:  # table (default)
        if not interesting:
            console.print("No API keys found")
        else:
            table = Table(title="API keys")
            table.add_column("Name", style="cyan")
            table.add_column("Field")
            table.add_column("Domain")
            table.add_column("Preview", style="yellow")

            for result in interesting:
                if result.matched:
                    table.add_row(
                        escape(result.item_name),
                        escape(result.field.describe()) if result.field else "",
                        escape(result.domain),
                        result.preview(settings.preview_length),
                    )
                else:
                    table.add_row(
                        f"? {escape(result.item_name)}",
                        "no key pattern",
                        escape(result.domain),
                        "",
                    )
            console.print(table)

    for result in report.suspected:
        console.print(
            f"[yellow]Warning:[/yellow] '{escape(result.item_name)}' suggests an API key "
            "but no key pattern was found"
        )
    for failure in report.failures:
        console.print(f"[yellow]Warning:[/yellow] {escape(str(failure))}")


@main.command(name="organize")
@click.option(
    "--output-dir",
    "-O",
    type=click.Path(file_okay=False),
    help="Directory for generated templates",
)
@click.option(
    "--format",
    "-f",
    "usage_format",
    type=click.Choice(list(FORMAT_REGISTRY)),
    help="Format of the example usage block",
)
@click.option(
    "--on-collision",
    type=click.Choice([p.value for p in CollisionPolicy]),
    help="What to do when two items generate the same name",
)
@click.pass_context
def organize_command(
    ctx: click.Context,
    output_dir: str | None,
    usage_format: str | None,
    on_collision: str | None,
) -> None:
    """Generate chezmoi templates for every API key in the vault."""
    try:
        settings = _settings(ctx).merged(
            output_dir=output_dir,
            usage_format=usage_format,
            collision_policy=on_collision,
        )
        report = Organizer(_get_client(ctx), settings).organize()
    except (BwChezmoiError, OSError) as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        sys.exit(1)

    for written in report.written:
        console.print(
            f"Found API key in: {escape(written.item_name)} -> "
            f"Standardized as: [cyan]{escape(written.name)}[/cyan]"
        )
        if written.renamed_from:
            console.print(
                f"  [yellow]Note:[/yellow] '{escape(written.renamed_from)}' was taken, "
                f"renamed to '{escape(written.name)}'"
            )
        console.print(
            f"  [green]✓[/green] Created template: {escape(str(written.path))}"
        )

    for result in report.skipped_collisions:
        console.print(
            f"[yellow]Warning:[/yellow] Skipped '{escape(result.item_name)}': "
            "generated name already in use"
        )
    for result in report.suspected:
        console.print(
            f"[yellow]Warning:[/yellow] '{escape(result.item_name)}' suggests an API key "
            "but no key pattern was found"
        )
    for failure in report.failures:
        console.print(f"[yellow]Warning:[/yellow] {escape(str(failure))}")

    console.print(
        "[green]✓[/green] Created master configuration template: "
        f"{escape(str(report.master_path))}"
    )
    console.print()
    console.print(
        f"Generated {len(report.written)} template(s) in "
        f"{escape(str(settings.output_dir))}"
    )
    console.print("To use these with chezmoi:")
    console.print("  1. Move the templates to your chezmoi source directory")
    console.print("  2. Reference them from your config templates")
    console.print("  3. Run 'chezmoi apply' to generate your configuration files")


@main.command(name="init")
@click.argument("target", type=click.Path(file_okay=False), default="demo-dotfiles")
@click.option("--force", is_flag=True, help="Overwrite existing example files")
@click.pass_context
def init_command(ctx: click.Context, target: str, force: bool) -> None:
    """Write example chezmoi templates that read API keys from Bitwarden.

    Also creates a default config.toml in the config directory if there
    is none yet.
    """
    entries = [
        (item, generate_name(item, domain), "password") for item, domain in EXAMPLE_ITEMS
    ]
    files = {
        "config.tmpl": emit_config_template(
            "Example configuration template using Bitwarden API keys", entries, "toml"
        ),
        "private_dot_env.tmpl": emit_config_template(
            "Environment variables using Bitwarden API keys", entries, "env"
        ),
        "private_dot_aider.conf.yml.tmpl": emit_config_template(
            "Aider configuration using Bitwarden API keys", entries, "yaml"
        ),
    }

    try:
        target_path = Path(target)
        target_path.mkdir(parents=True, exist_ok=True)

        for file_name, content in files.items():
            path = target_path / file_name
            if path.exists() and not force:
                console.print(
                    f"[yellow]Warning:[/yellow] {escape(str(path))} already exists, skipping "
                    "(use --force to overwrite)"
                )
                continue
            path.write_text(content, encoding="utf-8")
            console.print(f"[green]✓[/green] Created {escape(str(path))}")

        settings_file = write_default_settings(ctx.obj["config_dir"])
        if settings_file:
            console.print(f"[green]✓[/green] Created settings: {escape(str(settings_file))}")
        else:
            console.print(
                "Settings already present in "
                f"{escape(str(get_config_dir(ctx.obj['config_dir'])))}"
            )
    except OSError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        sys.exit(1)

    console.print()
    console.print("Store these items in Bitwarden to use the examples:")
    for item, _ in EXAMPLE_ITEMS:
        console.print(f"  - '{item}' (with the key in the password field)")
    console.print(f"Then run: chezmoi init {escape(str(target_path.resolve()))}")


if __name__ == "__main__":
    main()
