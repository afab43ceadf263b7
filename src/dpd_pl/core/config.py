"""Configuración del cliente.

Por qué aquí:
- Centraliza variables de entorno (pydantic-settings) sin contaminar la CLI.
- Los límites (timeout, reintentos) se validan en este borde; el core recibe
  valores ya acotados.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Any, Literal

from pydantic import Field
from pydantic import ValidationError as PydanticValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from dpd_pl.core.domain.models import Credentials
from dpd_pl.core.endpoints import Environment
from dpd_pl.core.errors import ConfigurationError


def get_user_config_dir() -> Path:
    """Directorio de configuración por usuario (cross-platform, sin dependencias)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "dpd-pl"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "dpd-pl"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "dpd-pl"
    return Path.home() / ".config" / "dpd-pl"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def _parse_env_lines(text: str) -> dict[str, str]:
    data: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key:
            data[key] = value
    return data


def write_user_env_vars(values: dict[str, str], env_path: Path | None = None) -> Path:
    """Escribe/actualiza variables en el .env global del usuario."""

    env_path = env_path or get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        existing = _parse_env_lines(env_path.read_text(encoding="utf-8"))

    existing.update({k: v for k, v in values.items() if v is not None})

    lines = ["# dpd-pl user config (.env)"]
    for key in sorted(existing.keys()):
        lines.append(f"{key}={existing[key]}")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    try:
        env_path.chmod(0o600)
    except OSError:
        # Windows/FS sin permisos POSIX: el archivo queda con los permisos por defecto.
        pass
    return env_path


class DPDSettings(BaseSettings):
    """Configuración central del cliente DPD.

    Por qué pydantic-settings:
    - Tipado + validación en el borde (env vars) sin ensuciar el Core con lógica.
    - Un único contrato de configuración para CLI/cliente/tests.
    """

    model_config = SettingsConfigDict(
        env_prefix="DPD_",
        extra="ignore",
        case_sensitive=False,
        # Orden: proyecto primero (dev), luego config global de usuario.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    login: str | None = Field(default=None, description="Login (FID de usuario) de DPD.")
    password: str | None = Field(default=None, repr=False, description="Password del webservice.")
    master_fid: str | None = Field(default=None, description="FID maestro de la cuenta.")

    environment: Environment = Field(
        default=Environment.PRODUCTION,
        description="Entorno de servicios: production | demo.",
    )
    timeout_ms: int = Field(
        default=30_000,
        ge=1_000,
        le=60_000,
        description="Timeout por intento (milisegundos).",
    )
    max_retries: int = Field(
        default=3,
        ge=0,
        le=5,
        description="Reintentos máximos ante fallos transitorios.",
    )
    retry_delay_ms: int = Field(
        default=1_000,
        ge=0,
        le=60_000,
        description="Retardo base del backoff lineal (milisegundos).",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="WARNING",
        description="Nivel del logger `dpd_pl`.",
    )

    def credentials(self) -> Credentials:
        """Credenciales inmutables; `ConfigurationError` si faltan."""

        missing = [
            name
            for name in ("login", "password", "master_fid")
            if not (getattr(self, name) or "").strip()
        ]
        if missing:
            names = ", ".join(f"DPD_{m.upper()}" for m in missing)
            raise ConfigurationError(f"Missing DPD credentials: {names}")
        return Credentials(
            login=self.login.strip(),  # type: ignore[union-attr]
            password=self.password,  # type: ignore[arg-type]
            master_fid=self.master_fid.strip(),  # type: ignore[union-attr]
        )

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_ms / 1000


def load_settings(**overrides: Any) -> DPDSettings:
    """Construye `DPDSettings`; los errores de límites se vuelven `ConfigurationError`."""

    values = {k: v for k, v in overrides.items() if v is not None}
    try:
        return DPDSettings(**values)
    except PydanticValidationError as exc:
        fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in exc.errors())
        raise ConfigurationError(f"Invalid DPD configuration: {fields}", cause=exc) from exc
