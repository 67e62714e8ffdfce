"""
BaseService -- abstract base for flush-only kernel and engine services.

Responsibility:
    Provides the common constructor and session-handling contract for
    services that participate in a caller-owned unit of work.  Subclasses
    use ``session.flush()`` -- never ``session.commit()``.

Architecture position:
    Kernel > Services.  Module services that own a transaction boundary
    (commit on success, rollback on failure) compose BaseService
    subclasses; they do not inherit from this class.

Failure modes:
    - If a subclass calls ``session.commit()`` it breaks the atomicity of
      the caller's unit of work.
"""

from abc import ABC
from typing import Generic, TypeVar

from sqlalchemy.orm import Session

from recognition_kernel.db.base import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseService(ABC, Generic[ModelType]):
    """
    Abstract base class for flush-only services.

    Guarantees:
        - The service never calls ``session.commit()`` or
          ``session.rollback()`` -- the caller controls transaction
          boundaries.
    """

    def __init__(self, session: Session):
        self.session = session
