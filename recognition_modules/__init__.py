"""
Recognition Modules.

Thin orchestration layers over the Recognition Kernel.  Each module contains:
- Domain models (the nouns) and status transitions
- Pure calculations
- ORM persistence models
- Services that own the transaction boundary

Modules:
- Amortization: schedules, entry generation, posting lifecycle
- Depreciation: fixed-asset depreciation figures and yearly reports
"""

from recognition_modules._orm_registry import import_all_orm_models

__all__ = ["import_all_orm_models"]
