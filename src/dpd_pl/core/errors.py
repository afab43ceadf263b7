"""Jerarquía de errores del cliente DPD.

Por qué una sola jerarquía:
- Todo fallo llega al llamador como un objeto tipado (`DPDError`) con `code`,
  `kind` y `transient`, así puede decidir si reintentar, alertar o corregir
  el input sin inspeccionar mensajes.
- El invocador usa `transient` para clasificar; ningún otro componente
  necesita conocer las excepciones de zeep/httpx.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Any, ClassVar, Sequence

if TYPE_CHECKING:
    from dpd_pl.core.validation import Violation


class ErrorKind(str, Enum):
    """Categoría de alto nivel de un fallo."""

    CONFIGURATION = "configuration"
    NOT_INITIALIZED = "not_initialized"
    NETWORK = "network"
    PROCEDURE_NOT_FOUND = "procedure_not_found"
    VALIDATION = "validation"
    SERVICE = "service"


class DPDError(Exception):
    """Base de todos los errores del cliente."""

    kind: ClassVar[ErrorKind] = ErrorKind.SERVICE
    default_code: ClassVar[str] = "DPD_ERROR"
    transient: ClassVar[bool] = False

    def __init__(
        self,
        message: str,
        code: str | None = None,
        *,
        cause: BaseException | None = None,
        details: Any = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.cause = cause
        self.details = details
        if cause is not None:
            self.__cause__ = cause

    def to_dict(self) -> dict[str, Any]:
        """Vista serializable para logs y salida JSON de la CLI."""

        out: dict[str, Any] = {
            "error": type(self).__name__,
            "kind": self.kind.value,
            "code": self.code,
            "message": self.message,
        }
        if self.cause is not None:
            out["cause"] = f"{type(self.cause).__name__}: {self.cause}"
        return out

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r})"


class ConfigurationError(DPDError):
    """Entorno/endpoint irresoluble o configuración incompleta."""

    kind = ErrorKind.CONFIGURATION
    default_code = "CONFIGURATION_ERROR"


class NotInitializedError(DPDError):
    """Operación invocada antes de `initialize()`."""

    kind = ErrorKind.NOT_INITIALIZED
    default_code = "NOT_INITIALIZED"


class NetworkError(DPDError):
    """Fallo de transporte (timeout, conexión rechazada, TLS, WSDL)."""

    kind = ErrorKind.NETWORK
    default_code = "NETWORK_ERROR"
    transient = True


class ProcedureNotFoundError(DPDError):
    """El handle no expone el procedimiento pedido (error de programación)."""

    kind = ErrorKind.PROCEDURE_NOT_FOUND
    default_code = "PROCEDURE_NOT_FOUND"

    def __init__(self, procedure: str, *, available: Sequence[str] = ()) -> None:
        super().__init__(f"Remote procedure not found: {procedure}")
        self.procedure = procedure
        self.available = tuple(sorted(available))


class ValidationError(DPDError):
    """Input del llamador que no cumple su contrato; nunca llega a la red."""

    kind = ErrorKind.VALIDATION
    default_code = "VALIDATION_ERROR"

    def __init__(
        self,
        message: str,
        violations: Sequence[Violation] = (),
        code: str | None = None,
        *,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message, code, cause=cause)
        self.violations = tuple(violations)

    def to_dict(self) -> dict[str, Any]:
        out = super().to_dict()
        out["violations"] = [v.to_dict() for v in self.violations]
        return out


class ServiceError(DPDError):
    """Fallo reportado por DPD, respuesta inválida o reintentos agotados.

    Códigos usados:
    - `API_ERROR`: `Status` distinto de OK en una respuesta bien formada.
    - `INVALID_RESPONSE`: la respuesta no cumple el contrato (ver `violations`).
    - `RETRIES_EXHAUSTED`: fallos transitorios hasta agotar `max_retries`.
    - `SOAP_FAULT`, `HTTP_<status>`, `REMOTE_FAILURE`, `MISSING_WAYBILL`.
    """

    kind = ErrorKind.SERVICE
    default_code = "SERVICE_ERROR"

    def __init__(
        self,
        message: str,
        code: str | None = None,
        *,
        cause: BaseException | None = None,
        details: Any = None,
        violations: Sequence[Violation] = (),
        procedure: str | None = None,
        attempts: int | None = None,
    ) -> None:
        super().__init__(message, code, cause=cause, details=details)
        self.violations = tuple(violations)
        self.procedure = procedure
        self.attempts = attempts

    def to_dict(self) -> dict[str, Any]:
        out = super().to_dict()
        if self.procedure:
            out["procedure"] = self.procedure
        if self.attempts is not None:
            out["attempts"] = self.attempts
        if self.violations:
            out["violations"] = [v.to_dict() for v in self.violations]
        return out
