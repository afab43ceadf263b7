"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- Permite reutilizar tablas/paneles en múltiples comandos.
"""

from __future__ import annotations

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from dpd_pl import __version__
from dpd_pl.core.domain.models import (
    CourierPickupResponse,
    ParcelShop,
    ParcelStatus,
    PostcodeInfo,
)
from dpd_pl.core.errors import DPDError


def print_banner(console: Console) -> None:
    """Imprime el banner de bienvenida.

    Por qué aquí:
    - Evita dependencias circulares (main <-> doctor).
    - Permite desactivar banner en modos no interactivos (JSON/pipelines).
    """

    title = Text(f"DPD-PL {__version__}", style="bold red")
    subtitle = Text("DPD Polska • Paquetes • Etiquetas • Seguimiento", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="red", padding=(1, 4)))


def build_status_panel(status: ParcelStatus) -> Panel:
    """Panel con el estado actual y el historial de eventos."""

    body = Text()
    body.append(f"{status.status}", style="bold")
    if status.status_description:
        body.append(f" - {status.status_description}")
    body.append("\n")
    if status.last_update:
        body.append(f"Última actualización: {status.last_update}\n", style="dim")
    if status.events:
        body.append("\nEventos:\n", style="bold")
        for event in status.events:
            where = f" ({event.location})" if event.location else ""
            body.append(f"- {event.date}  {event.description}{where}\n")
    body.append(f"\n{status.tracking_url}", style="magenta")
    return Panel(body, title=Text(status.waybill, style="bold cyan"), border_style="cyan")


def build_parcel_shops_table(shops: list[ParcelShop]) -> Table:
    table = Table(title="Parcel Shops")
    table.add_column("PUDO", style="cyan", no_wrap=True)
    table.add_column("Name", style="white")
    table.add_column("Address", style="white")
    table.add_column("City", style="green")
    table.add_column("Hours", style="dim")
    table.add_column("Distance", style="magenta", justify="right")
    for shop in shops:
        table.add_row(
            shop.pudo_id,
            shop.name,
            f"{shop.address}, {shop.postal_code}",
            shop.city,
            shop.opening_hours or "",
            f"{shop.distance:.1f}" if shop.distance is not None else "",
        )
    return table


def build_postcode_table(info: PostcodeInfo) -> Table:
    table = Table(title="Postcode")
    table.add_column("Postcode", style="cyan", no_wrap=True)
    table.add_column("City", style="white")
    table.add_column("Country", style="green")
    table.add_column("Depot", style="dim")
    table.add_row(info.postcode, info.city, info.country_code, info.depot or "")
    return table


def build_pickup_panel(pickup: CourierPickupResponse) -> Panel:
    body = Text()
    body.append(f"Pickup ID: {pickup.pickup_id}\n", style="bold")
    body.append(f"Estado: {pickup.status}\n")
    body.append(f"Fecha: {pickup.pickup_date}")
    return Panel(body, title=Text("Recogida", style="bold green"), border_style="green")


def build_error_panel(error: DPDError) -> Panel:
    """Panel de error con código y violaciones (si las hay)."""

    body = Text()
    body.append(f"{error.code}\n", style="bold")
    body.append(error.message)
    for violation in getattr(error, "violations", ()):
        body.append(f"\n- {violation.path}: {violation.reason.value} ({violation.message})", style="dim")
    return Panel(body, title=Text(type(error).__name__, style="bold red"), border_style="red")
