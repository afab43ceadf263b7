"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console
from rich.table import Table

from dpd_pl.core.config import DPDSettings, get_user_env_file, load_settings, write_user_env_vars
from dpd_pl.core.endpoints import ServiceKind, resolve_endpoint
from dpd_pl.core.errors import DPDError
from dpd_pl.core.interfaces.transport import ConnectionOptions
from dpd_pl.core.session import default_factories, open_session

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


async def _check_handshake(kind: ServiceKind, url: str, options: ConnectionOptions) -> tuple[bool, str]:
    factory = default_factories()[kind]
    try:
        handle = await open_session(url, options, factory)
    except DPDError as exc:
        return False, exc.message
    try:
        count = len(handle.procedures)
    finally:
        await handle.aclose()
    return True, f"{count} procedures"


def _options_for(settings: DPDSettings) -> ConnectionOptions:
    try:
        credentials = settings.credentials()
    except DPDError:
        credentials = None
    return ConnectionOptions(timeout=settings.timeout_seconds, credentials=credentials)


@app.command()
def run(
    demo: bool = typer.Option(False, "--demo", help="Check the demo environment."),
    offline: bool = typer.Option(False, "--offline", help="Skip WSDL/REST handshakes."),
) -> None:
    """Run baseline diagnostics and show recommended fixes."""

    try:
        settings = load_settings(environment="demo" if demo else None)
    except DPDError as exc:
        _console.print(f"[red]Configuration error:[/red] {exc.message}")
        raise typer.Exit(1) from exc

    table = Table(title="DPD-PL Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    # Config
    try:
        settings.credentials()
        table.add_row("Credentials", "OK", f"login={settings.login} masterFid={settings.master_fid}")
    except DPDError as exc:
        table.add_row("Credentials", "FAIL", exc.message)
    table.add_row("Environment", "OK", settings.environment.value)
    table.add_row(
        "Retry policy",
        "OK",
        f"timeout={settings.timeout_ms}ms retries={settings.max_retries} delay={settings.retry_delay_ms}ms",
    )

    # Endpoints + handshake (best-effort)
    options = _options_for(settings)
    failed = False
    for kind in ServiceKind:
        try:
            url = resolve_endpoint(settings.environment, kind)
        except DPDError as exc:
            table.add_row(kind.value, "FAIL", exc.message)
            failed = True
            continue
        if offline:
            table.add_row(kind.value, "SKIPPED", url)
            continue
        ok, detail = asyncio.run(_check_handshake(kind, url, options))
        failed = failed or not ok
        table.add_row(kind.value, "OK" if ok else "FAIL", f"{url} ({detail})")

    _console.print(table)

    if failed:
        _console.print(
            "\n[yellow]Note:[/yellow] Handshake failures usually mean no network access or a blocked "
            "endpoint. Try `--demo` to check the test environment."
        )


@app.command()
def setup() -> None:
    """Interactive credential setup (stores config in the user config .env)."""

    environment = typer.prompt(
        "Environment (production/demo)",
        default="demo",
        show_default=True,
    ).strip().lower()
    if environment not in {"production", "demo"}:
        raise typer.BadParameter("environment must be production or demo")

    login = typer.prompt("DPD login").strip()
    master_fid = typer.prompt("Master FID").strip()
    password = typer.prompt("Password", hide_input=True, confirmation_prompt=False).strip()

    if not login or not master_fid or not password:
        raise typer.BadParameter("login, master FID and password are required")

    env_path = write_user_env_vars(
        {
            "DPD_ENVIRONMENT": environment,
            "DPD_LOGIN": login,
            "DPD_MASTER_FID": master_fid,
            "DPD_PASSWORD": password,
        },
        get_user_env_file(),
    )

    _console.print(f"[green]Saved DPD config to:[/green] {env_path}")
