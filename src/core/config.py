"""Configuración del Core.

Por qué aquí:
- Centraliza variables de entorno (pydantic-settings) sin contaminar la CLI.
- Los adaptadores HTTP leen URLs y timeouts desde un único contrato.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def get_user_config_dir() -> Path:
    """Directorio de configuración por usuario (cross-platform, sin dependencias)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "iss-spotter"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "iss-spotter"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "iss-spotter"
    return Path.home() / ".config" / "iss-spotter"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def _parse_env_lines(text: str) -> dict[str, str]:
    data: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        if key:
            data[key] = value.strip().strip('"').strip("'")
    return data


def write_user_env_vars(values: dict[str, str], *, env_path: Path | None = None) -> Path:
    """Escribe/actualiza variables en el .env global del usuario."""

    env_path = env_path or get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        existing = _parse_env_lines(env_path.read_text(encoding="utf-8"))

    existing.update({k: v for k, v in values.items() if v is not None})

    lines = ["# ISS Spotter user config (.env)"]
    for key in sorted(existing.keys()):
        lines.append(f"{key}={existing[key]}")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


class AppSettings(BaseSettings):
    """Configuración central de la aplicación.

    Todas las variables se leen con prefijo `ISS_SPOTTER_`
    (p.ej. `ISS_SPOTTER_HTTP_TIMEOUT_SECONDS=5`).
    """

    model_config = SettingsConfigDict(
        env_prefix="ISS_SPOTTER_",
        extra="ignore",
        case_sensitive=False,
        # Orden: proyecto primero (dev), luego config global de usuario.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    http_timeout_seconds: float = Field(
        default=20.0,
        gt=0,
        description="Timeout por request (segundos).",
    )
    user_agent: str = Field(
        default="iss-spotter/0.1 (+https://local)",
        min_length=1,
        description="User-Agent para las peticiones a servicios externos.",
    )

    ip_service_url: str = Field(
        default="https://api.ipify.org?format=json",
        min_length=8,
        description="Servicio eco de IP pública; responde `{\"ip\": ...}`.",
    )
    geolocation_url_template: str = Field(
        default="https://freegeoip.app/json/{ip}",
        min_length=8,
        description="Servicio de geolocalización; `{ip}` se sustituye por la IP.",
    )
    pass_service_url: str = Field(
        default="https://iss-pass.herokuapp.com/json/",
        min_length=8,
        description="Servicio de predicción de pases; recibe `lat` y `lon`.",
    )
    pass_count: int | None = Field(
        default=None,
        ge=1,
        le=100,
        description="Número de pases a pedir (parámetro `n`). Sin valor: lo que decida el servicio.",
    )

    log_level: str = Field(
        default="WARNING",
        description="Nivel de logging (DEBUG, INFO, WARNING, ERROR).",
    )
    json_logs: bool = Field(
        default=False,
        description="Emitir logs en JSON en lugar de formato consola.",
    )

    @field_validator("geolocation_url_template")
    @classmethod
    def _template_has_ip(cls, value: str) -> str:
        if "{ip}" not in value:
            raise ValueError("geolocation_url_template must contain '{ip}'")
        return value

    @field_validator("log_level")
    @classmethod
    def _normalize_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown log level: {value}")
        return level
