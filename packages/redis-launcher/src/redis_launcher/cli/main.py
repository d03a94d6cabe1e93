"""Redis launcher CLI - role election and bootstrap for a Redis pool."""

import asyncio
import logging
from dataclasses import replace
from typing import Optional

import httpx
import typer
from rich.console import Console
from rich.logging import RichHandler

from launcher_protocols import BecomePrimary, BecomeReplica, RoleOverride
from redis_launcher.config import LauncherSettings
from redis_launcher.exceptions import LauncherError
from redis_launcher.factory import (
    create_label_updater,
    create_launcher,
    create_monitor_template,
    create_registry,
)
from redis_launcher.kube_client import create_kube_http_client
from redis_launcher.resolver import RoleResolver

app = typer.Typer(
    name="redis-launcher",
    help="Decide this pod's Redis role and start it",
    no_args_is_help=True,
)

console = Console()


def _kube_http(settings: LauncherSettings) -> httpx.AsyncClient:
    return create_kube_http_client(
        settings.kube_api_url, settings.kube_token_file, settings.kube_ca_file
    )


def configure_logging(verbose: bool) -> None:
    """Send log records to stderr through rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@app.command(
    context_settings={"allow_extra_args": True, "ignore_unknown_options": True}
)
def launch(
    extra_args: Optional[list[str]] = typer.Argument(
        None, help="Arguments passed through to redis-server / redis-sentinel"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """
    Resolve this pod's role and hand off to the store.

    Environment variables:
        MASTER / SENTINEL: Force the primary or witness role
        REDIS_CHART_PREFIX: Pool name prefix
        QUORUM, SENTINEL_DOWN_TIME: Sentinel monitor settings
        REDIS_PASS / REDIS_PASSWORD_FILE: Authentication secret
    """
    configure_logging(verbose)
    settings = LauncherSettings()

    async def _run() -> int:
        async with _kube_http(settings) as http:
            launcher = create_launcher(settings, http)
            return await launcher.run(extra_args or [])

    try:
        status = asyncio.run(_run())
    except LauncherError as e:
        logging.getLogger(__name__).error("Launch failed: %s", e)
        raise typer.Exit(1)

    raise typer.Exit(status)


@app.command("label-updater")
def label_updater(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Keep this pod's podIP and runID labels current. Runs until killed."""
    configure_logging(verbose)
    settings = LauncherSettings()

    async def _run() -> None:
        async with _kube_http(settings) as http:
            await create_label_updater(settings, http).run()

    try:
        asyncio.run(_run())
    except KeyboardInterrupt:
        pass


@app.command()
def resolve(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Print the role this pod would take, without labelling or launching."""
    configure_logging(verbose)
    settings = LauncherSettings()

    async def _resolve():
        async with _kube_http(settings) as http:
            resolver = RoleResolver(
                registry=create_registry(settings, http),
                pool_prefix=settings.redis_chart_prefix,
            )
            override = RoleOverride(primary=settings.master, witness=settings.sentinel)
            return await resolver.resolve(settings.hostname, override)

    try:
        outcome = asyncio.run(_resolve())
    except LauncherError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    if isinstance(outcome, BecomePrimary):
        console.print(f"[bold]{settings.hostname}[/bold]: [green]primary[/green]")
    elif isinstance(outcome, BecomeReplica):
        console.print(
            f"[bold]{settings.hostname}[/bold]: [yellow]replica[/yellow] of "
            f"{outcome.target_identity or '?'} ({outcome.target_address})"
        )
    else:
        console.print(f"[bold]{settings.hostname}[/bold]: [cyan]witness[/cyan]")


@app.command("sentinel-config")
def sentinel_config(
    master_ip: str = typer.Option(..., "--master-ip", help="Primary address"),
    port: Optional[int] = typer.Option(
        None, "--port", "-p", help="Primary port (default: service port or 6379)"
    ),
) -> None:
    """Render the Sentinel configuration for a primary to stdout."""
    settings = LauncherSettings()
    if port is None:
        _, port = settings.master_service()

    config = replace(
        create_monitor_template(settings), master_address=master_ip, master_port=port
    )
    typer.echo(config.render(), nl=False)


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
