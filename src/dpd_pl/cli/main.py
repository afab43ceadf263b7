"""CLI `dpd-pl` (Typer).

Por qué la CLI es fina:
- Solo traduce opciones a llamadas de `DPDClient`/`DPDSDK` y renderiza.
- Los errores tipados (`DPDError`) se capturan aquí, en el borde:
  validación -> exit 2, cualquier otro -> exit 1.
"""

from __future__ import annotations

import asyncio
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Awaitable, Callable, Optional, TypeVar

import typer
from pydantic import BaseModel
from rich.console import Console

from dpd_pl.adapters.label_exporter import export_label, export_protocol, to_json
from dpd_pl.cli import doctor
from dpd_pl.cli.ui_components import (
    build_error_panel,
    build_parcel_shops_table,
    build_pickup_panel,
    build_postcode_table,
    build_status_panel,
    print_banner,
)
from dpd_pl.core.client import DPDClient
from dpd_pl.core.config import DPDSettings, load_settings
from dpd_pl.core.domain.models import LabelResponse
from dpd_pl.core.errors import DPDError, ValidationError
from dpd_pl.core.log import setup_logging
from dpd_pl.core.services.sdk import DPDSDK

T = TypeVar("T")

app = typer.Typer(
    name="dpd-pl",
    help="DPD Polska web services from the command line.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)
app.add_typer(doctor.app, name="doctor")

_console = Console()
_err_console = Console(stderr=True)


@dataclass
class CLIState:
    environment: str | None = None
    json_output: bool = False
    verbose: bool = False


@app.callback()
def main_callback(
    ctx: typer.Context,
    demo: Optional[bool] = typer.Option(
        None,
        "--demo/--production",
        help="Target environment (default: DPD_ENVIRONMENT or production).",
    ),
    json_output: bool = typer.Option(False, "--json", help="Print results as JSON."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging to stderr."),
) -> None:
    environment = None if demo is None else ("demo" if demo else "production")
    ctx.obj = CLIState(environment=environment, json_output=json_output, verbose=verbose)


def _make_client(settings: DPDSettings) -> DPDClient:
    return DPDClient(settings)


async def _with_client(settings: DPDSettings, action: Callable[[DPDClient], Awaitable[T]]) -> T:
    async with _make_client(settings) as client:
        return await action(client)


def _execute(ctx: typer.Context, action: Callable[[DPDClient], Awaitable[T]]) -> T:
    state: CLIState = ctx.obj
    try:
        settings = load_settings(environment=state.environment)
        setup_logging("DEBUG" if state.verbose else settings.log_level, console=_err_console)
        return asyncio.run(_with_client(settings, action))
    except ValidationError as exc:
        _print_error(state, exc)
        raise typer.Exit(2) from exc
    except DPDError as exc:
        _print_error(state, exc)
        raise typer.Exit(1) from exc


def _print_error(state: CLIState, error: DPDError) -> None:
    if state.json_output:
        typer.echo(json.dumps(error.to_dict(), ensure_ascii=False, indent=2, sort_keys=True))
    else:
        _err_console.print(build_error_panel(error))


def _print_json(model: BaseModel | list[BaseModel] | None) -> None:
    typer.echo(to_json(model))


@app.command()
def track(ctx: typer.Context, waybill: str = typer.Argument(..., help="Waybill number.")) -> None:
    """Show the tracking status of a parcel."""

    status = _execute(ctx, lambda client: client.tracking.get_parcel_status(waybill))
    if ctx.obj.json_output:
        _print_json(status)
        return
    _console.print(build_status_panel(status))


@app.command()
def postcode(
    ctx: typer.Context,
    code: str = typer.Argument(..., help="Postcode, e.g. 00-001."),
    country: str = typer.Option("PL", "--country", help="ISO country code."),
) -> None:
    """Look up postcode information."""

    info = _execute(ctx, lambda client: client.tracking.get_postcode_info(code, country))
    if ctx.obj.json_output:
        _print_json(info)
        return
    _console.print(build_postcode_table(info))


@app.command()
def parcelshops(
    ctx: typer.Context,
    city: Optional[str] = typer.Option(None, "--city"),
    postal_code: Optional[str] = typer.Option(None, "--postal-code"),
    address: Optional[str] = typer.Option(None, "--address"),
    country: str = typer.Option("PL", "--country"),
    limit: Optional[int] = typer.Option(None, "--limit", min=1, max=100),
    hide_closed: bool = typer.Option(False, "--hide-closed"),
) -> None:
    """Search DPD pickup points (PUDO)."""

    query = {
        "city": city,
        "postalCode": postal_code,
        "address": address,
        "countryCode": country,
        "limit": limit,
        "hideClosed": True if hide_closed else None,
    }
    shops = _execute(ctx, lambda client: client.pudo.find_parcel_shops(query))
    if ctx.obj.json_output:
        _print_json(shops)
        return
    _console.print(build_parcel_shops_table(shops))


@app.command()
def parcelshop(ctx: typer.Context, pudo_id: str = typer.Argument(..., help="PUDO id, e.g. PL14187.")) -> None:
    """Show a single pickup point."""

    shop = _execute(ctx, lambda client: client.pudo.get_parcel_shop(pudo_id))
    if ctx.obj.json_output:
        _print_json(shop)
        return
    if shop is None:
        _err_console.print(f"[yellow]Parcel shop not found:[/yellow] {pudo_id}")
        raise typer.Exit(1)
    _console.print(build_parcel_shops_table([shop]))


@app.command()
def label(
    ctx: typer.Context,
    request_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="CreateLabelRequest JSON."),
    output: Path = typer.Option(Path("labels"), "--output", "-o", help="File or directory for the label."),
) -> None:
    """Generate a package number and print its label in one step."""

    try:
        payload = json.loads(request_file.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise typer.BadParameter(f"Invalid JSON: {exc}") from exc

    result = _execute(ctx, lambda client: DPDSDK(client=client).create_label(payload))

    target = output / result.waybill if output.suffix == "" else output
    fmt = (payload.get("label") or {}).get("format", "PDF") if isinstance(payload, dict) else "PDF"
    path = export_label(
        label=LabelResponse(label_data=result.pdf_base64, format=fmt),
        output_path=target,
    )

    if ctx.obj.json_output:
        _print_json(result)
        return
    _console.print(f"[green]Waybill:[/green] {result.waybill}")
    _console.print(f"[green]Label saved to:[/green] {path}")
    _console.print(f"[dim]{result.tracking_url}[/dim]")


@app.command()
def protocol(
    ctx: typer.Context,
    waybills: list[str] = typer.Argument(..., help="Waybill numbers."),
    output: Path = typer.Option(Path("protocol.pdf"), "--output", "-o"),
) -> None:
    """Generate the courier handover protocol."""

    result = _execute(ctx, lambda client: client.domestic.generate_protocol(waybills))
    path = export_protocol(protocol=result, output_path=output)
    if ctx.obj.json_output:
        _print_json(result)
        return
    _console.print(f"[green]Protocol saved to:[/green] {path}")


@app.command()
def pickup(
    ctx: typer.Context,
    date: str = typer.Option(..., "--date", help="YYYY-MM-DD"),
    time_from: str = typer.Option(..., "--from", help="HH:MM"),
    time_to: str = typer.Option(..., "--to", help="HH:MM"),
    waybills: Optional[list[str]] = typer.Argument(None, help="Optional waybills."),
) -> None:
    """Order a courier pickup."""

    result = _execute(
        ctx,
        lambda client: client.domestic.pickup_call(date, time_from, time_to, waybills or None),
    )
    if ctx.obj.json_output:
        _print_json(result)
        return
    _console.print(build_pickup_panel(result))


@app.command()
def version() -> None:
    """Print the banner and version."""

    print_banner(_console)


def run() -> None:
    app()


if __name__ == "__main__":
    run()
