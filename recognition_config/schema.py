"""
Configuration Schema (``recognition_config.schema``).

Frozen dataclasses describing the company-level settings the engine reads.
Only the fiscal-year start month and currency code influence computation;
the company name is carried for report headers.
"""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_COMPANY_NAME = "My Company"
DEFAULT_FISCAL_YEAR_START_MONTH = 1
DEFAULT_CURRENCY_CODE = "IDR"


@dataclass(frozen=True)
class CompanyConfig:
    """Singleton company configuration record."""

    company_name: str = DEFAULT_COMPANY_NAME
    fiscal_year_start_month: int = DEFAULT_FISCAL_YEAR_START_MONTH
    currency_code: str = DEFAULT_CURRENCY_CODE
