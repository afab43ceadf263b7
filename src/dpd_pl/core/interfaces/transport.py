"""Contratos de transporte.

Por qué Protocol:
- El invocador solo necesita "un handle que expone procedimientos y sabe
  invocarlos"; no le importa si debajo hay SOAP (zeep) o REST (httpx).
- Los tests sustituyen el handle por un stub en memoria sin herencia.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Mapping, Protocol, runtime_checkable

from dpd_pl.core.domain.models import Credentials


@dataclass(frozen=True)
class ConnectionOptions:
    """Opciones de handshake/transporte para un handle."""

    timeout: float = 30.0
    max_retries: int = 3
    credentials: Credentials | None = None


@runtime_checkable
class ConnectionHandle(Protocol):
    """Proxy a un conjunto de procedimientos remotos.

    Reglas de diseño:
    - `procedures` es fijo tras el handshake (solo lectura).
    - `invoke` devuelve el valor ya decodificado (dicts/listas planos).
    - Puede compartirse entre invocaciones concurrentes.
    """

    @property
    def procedures(self) -> frozenset[str]: ...

    async def invoke(self, procedure: str, args: Mapping[str, Any]) -> Any: ...

    async def aclose(self) -> None: ...


ConnectionFactory = Callable[[str, ConnectionOptions], Awaitable[ConnectionHandle]]
