"""Configuración de logging (Rich).

Por qué opt-in:
- La librería nunca configura logging al importarse; cada módulo solo usa
  `logging.getLogger(__name__)`.
- La aplicación (o la CLI) decide nivel y destino con `setup_logging`.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER = "dpd_pl"


def setup_logging(
    level: int | str = logging.WARNING,
    *,
    console: Console | None = None,
) -> logging.Logger:
    """Instala un `RichHandler` en el logger `dpd_pl` y fija el nivel.

    Llamarla de nuevo solo actualiza el nivel (no duplica handlers).
    """

    log = logging.getLogger(ROOT_LOGGER)
    log.setLevel(level)
    if any(isinstance(h, RichHandler) for h in log.handlers):
        return log

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(name)s | %(message)s"))
    log.addHandler(handler)
    log.propagate = False
    return log
