"""
recognition_config -- single public entrypoint for company configuration.

Responsibility:
    Provides ``get_company_config()``, the only way services obtain the
    fiscal-year start month and currency code at runtime.

Resolution order:
    1. Explicit ``path`` argument.
    2. ``RECOGNITION_COMPANY_CONFIG`` environment variable.
    3. The bundled ``sets/company.yaml``.
    When the resolved file does not exist the default configuration is
    returned, mirroring a freshly provisioned company record.

Architecture position:
    Configuration -- sits above ``recognition_kernel`` and below
    ``recognition_modules``.  The kernel MUST NEVER import from here.
"""

from __future__ import annotations

import os
from pathlib import Path

from recognition_config.loader import load_company_config
from recognition_config.schema import CompanyConfig
from recognition_kernel.logging_config import get_logger

_logger = get_logger("config")

CONFIG_ENV_VAR = "RECOGNITION_COMPANY_CONFIG"
_DEFAULT_CONFIG_FILE = Path(__file__).parent / "sets" / "company.yaml"


def resolve_config_path(path: Path | str | None = None) -> Path:
    """Apply the resolution order and return the candidate file path."""
    if path is not None:
        return Path(path)
    env_value = os.getenv(CONFIG_ENV_VAR, "").strip()
    if env_value:
        return Path(env_value).expanduser()
    return _DEFAULT_CONFIG_FILE


def get_company_config(path: Path | str | None = None) -> CompanyConfig:
    """Return the active company configuration."""
    resolved = resolve_config_path(path)
    if not resolved.exists():
        _logger.warning(
            "company_config_missing_using_defaults",
            extra={"path": str(resolved)},
        )
        return CompanyConfig()

    config = load_company_config(resolved)
    _logger.info(
        "company_config_loaded",
        extra={
            "path": str(resolved),
            "fiscal_year_start_month": config.fiscal_year_start_month,
            "currency_code": config.currency_code,
        },
    )
    return config


__all__ = [
    "CONFIG_ENV_VAR",
    "CompanyConfig",
    "get_company_config",
    "resolve_config_path",
]
