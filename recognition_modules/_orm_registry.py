"""
Module ORM Registry (``recognition_modules._orm_registry``).

Responsibility
--------------
Ensure all module-level SQLAlchemy ORM models are imported so that
``Base.metadata`` contains their table definitions before
``recognition_kernel.db.create_tables()`` runs.

Architecture position
---------------------
**Modules layer** -- utility.  MUST NOT be imported by ``recognition_kernel``.

Usage
-----
Entrypoints and ``tests/conftest.py`` call ``import_all_orm_models()``
and then ``create_tables()``.
"""


def import_all_orm_models() -> None:
    """Import every ``recognition_modules.*.orm`` module.  Idempotent."""
    # fmt: off
    import recognition_modules.amortization.orm  # noqa: F401
    import recognition_modules.depreciation.orm  # noqa: F401
    # fmt: on
