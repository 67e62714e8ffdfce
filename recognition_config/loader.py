"""
Configuration Loader (``recognition_config.loader``).

Responsibility
--------------
Loads the company configuration YAML file and parses it into the typed
``CompanyConfig`` dataclass.  Runtime callers go through
``recognition_config.get_company_config()``; this module is the parsing
layer behind it.

Failure modes
-------------
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Fiscal month outside 1..12, unknown currency, non-mapping document
  -> ``ValidationError``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from recognition_config.schema import (
    DEFAULT_COMPANY_NAME,
    DEFAULT_CURRENCY_CODE,
    DEFAULT_FISCAL_YEAR_START_MONTH,
    CompanyConfig,
)
from recognition_kernel.db.types import is_valid_currency
from recognition_kernel.domain.calendar import validate_fiscal_start_month
from recognition_kernel.exceptions import ValidationError


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
        ValidationError: if the document is not a mapping.
    """
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValidationError("company_config", f"{path} must contain a mapping")
    return data


def parse_company_config(data: dict[str, Any]) -> CompanyConfig:
    """
    Parse a ``CompanyConfig`` from a dict.

    Accepts either a top-level mapping or one nested under ``company``.
    Missing keys fall back to the defaults.
    """
    section = data.get("company", data)

    fiscal_month = section.get(
        "fiscal_year_start_month", DEFAULT_FISCAL_YEAR_START_MONTH,
    )
    validate_fiscal_start_month(fiscal_month)

    currency = str(section.get("currency_code", DEFAULT_CURRENCY_CODE)).strip().upper()
    if not is_valid_currency(currency):
        raise ValidationError("currency_code", f"not an ISO 4217 code: {currency!r}")

    return CompanyConfig(
        company_name=str(section.get("company_name", DEFAULT_COMPANY_NAME)),
        fiscal_year_start_month=fiscal_month,
        currency_code=currency,
    )


def load_company_config(path: Path) -> CompanyConfig:
    """Load and parse the company configuration file at *path*."""
    return parse_company_config(load_yaml_file(path))
