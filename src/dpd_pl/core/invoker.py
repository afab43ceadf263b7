"""Invocador de procedimientos remotos con reintentos acotados.

Invariantes:
    - Procedimiento ausente en el handle: `ProcedureNotFoundError`, sin intento.
    - Solo se reintentan fallos transitorios (red, timeout por intento).
    - Espera antes del intento k (k >= 2) = `base_delay * k`; sin jitter.
    - Tras `max_retries + 1` intentos fallidos: `ServiceError(RETRIES_EXHAUSTED)`
      con el nombre del procedimiento y el total de intentos; `cause` = último error.
    - La respuesta exitosa se devuelve sin interpretar.

Design Decisions:
    - El estado de reintento es local a cada llamada: invocaciones concurrentes
      sobre el mismo handle no comparten nada mutable.
    - Logger y `sleep` son dependencias explícitas (testeable sin parches globales).
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Mapping

import httpx

from dpd_pl.core.errors import DPDError, NetworkError, ProcedureNotFoundError, ServiceError
from dpd_pl.core.interfaces.transport import ConnectionHandle

if TYPE_CHECKING:
    from dpd_pl.core.config import DPDSettings

_log = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]

_REDACTED = "***"
_SECRET_KEYS = frozenset({"password"})


class Classification(str, Enum):
    TRANSIENT = "transient"
    PERMANENT = "permanent"


@dataclass(frozen=True)
class RetryPolicy:
    """Política de reintento (segundos)."""

    max_retries: int = 3
    base_delay: float = 1.0
    timeout: float = 30.0

    def __post_init__(self) -> None:
        if self.max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        if self.base_delay < 0:
            raise ValueError("base_delay must be >= 0")
        if self.timeout <= 0:
            raise ValueError("timeout must be > 0")

    @property
    def max_attempts(self) -> int:
        return self.max_retries + 1

    def delay_before(self, attempt: int) -> float:
        """Espera antes del intento `attempt` (1-indexed)."""

        if attempt <= 1:
            return 0.0
        return self.base_delay * attempt

    @classmethod
    def from_settings(cls, settings: DPDSettings) -> RetryPolicy:
        return cls(
            max_retries=settings.max_retries,
            base_delay=settings.retry_delay_ms / 1000,
            timeout=settings.timeout_ms / 1000,
        )


@dataclass
class RetryState:
    attempt: int = 0
    last_error: BaseException | None = None
    delay: float = 0.0


def classify(exc: BaseException) -> Classification:
    """Transitorio = vale la pena repetir exactamente la misma llamada."""

    if isinstance(exc, DPDError):
        return Classification.TRANSIENT if exc.transient else Classification.PERMANENT
    if isinstance(exc, (TimeoutError, asyncio.TimeoutError, ConnectionError, httpx.TransportError)):
        return Classification.TRANSIENT
    if isinstance(exc, OSError):
        return Classification.TRANSIENT
    return Classification.PERMANENT


def redact(value: Any) -> Any:
    """Copia del árbol de argumentos sin secretos (para logs)."""

    if isinstance(value, Mapping):
        return {
            k: (_REDACTED if k in _SECRET_KEYS else redact(v))
            for k, v in value.items()
        }
    if isinstance(value, (list, tuple)):
        return [redact(v) for v in value]
    return value


def _as_permanent(procedure: str, exc: BaseException) -> ServiceError:
    return ServiceError(
        f"{procedure} failed: {type(exc).__name__}: {exc}",
        "REMOTE_FAILURE",
        cause=exc,
        procedure=procedure,
    )


async def _attempt(
    handle: ConnectionHandle,
    procedure: str,
    args: Mapping[str, Any],
    timeout: float,
) -> Any:
    try:
        return await asyncio.wait_for(handle.invoke(procedure, args), timeout=timeout)
    except asyncio.TimeoutError as exc:
        raise NetworkError(
            f"{procedure} timed out after {timeout:g}s",
            "TIMEOUT",
            cause=exc,
        ) from exc


async def invoke(
    handle: ConnectionHandle,
    procedure: str,
    args: Mapping[str, Any],
    policy: RetryPolicy | None = None,
    *,
    logger: logging.Logger | None = None,
    sleep: Sleep = asyncio.sleep,
) -> Any:
    """Ejecuta `procedure` sobre `handle` y devuelve la respuesta cruda."""

    policy = policy or RetryPolicy()
    log = logger or _log

    available = handle.procedures
    if procedure not in available:
        raise ProcedureNotFoundError(procedure, available=available)

    state = RetryState()
    while state.attempt < policy.max_attempts:
        state.attempt += 1
        state.delay = policy.delay_before(state.attempt)
        if state.delay:
            log.warning(
                "Retrying %s in %.2fs (attempt %d/%d): %s",
                procedure,
                state.delay,
                state.attempt,
                policy.max_attempts,
                state.last_error,
            )
            await sleep(state.delay)

        log.debug(
            "Invoking %s",
            procedure,
            extra={"procedure": procedure, "attempt": state.attempt, "arguments": redact(args)},
        )
        try:
            result = await _attempt(handle, procedure, args, policy.timeout)
        except Exception as exc:
            state.last_error = exc
            if classify(exc) is Classification.PERMANENT:
                log.error("%s failed permanently: %s", procedure, exc)
                if isinstance(exc, DPDError):
                    raise
                raise _as_permanent(procedure, exc) from exc
            continue

        log.info(
            "%s succeeded",
            procedure,
            extra={"procedure": procedure, "attempt": state.attempt},
        )
        return result

    log.error("%s failed after %d attempts", procedure, state.attempt)
    raise ServiceError(
        f"{procedure} failed after {state.attempt} attempts: {state.last_error}",
        "RETRIES_EXHAUSTED",
        cause=state.last_error,
        procedure=procedure,
        attempts=state.attempt,
    )
