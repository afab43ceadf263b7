"""dpd-pl: cliente tipado y asíncrono para los servicios web de DPD Polska."""

from __future__ import annotations

__version__ = "0.1.0"

from dpd_pl.core.client import DPDClient
from dpd_pl.core.config import DPDSettings, load_settings
from dpd_pl.core.endpoints import Environment, ServiceKind
from dpd_pl.core.errors import (
    ConfigurationError,
    DPDError,
    NetworkError,
    NotInitializedError,
    ProcedureNotFoundError,
    ServiceError,
    ValidationError,
)
from dpd_pl.core.services.sdk import DPDSDK

__all__ = [
    "ConfigurationError",
    "DPDClient",
    "DPDError",
    "DPDSDK",
    "DPDSettings",
    "Environment",
    "NetworkError",
    "NotInitializedError",
    "ProcedureNotFoundError",
    "ServiceError",
    "ServiceKind",
    "ValidationError",
    "__version__",
    "load_settings",
]
