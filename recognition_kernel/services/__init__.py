"""Services for the recognition kernel (write side)."""

from recognition_kernel.services.base import BaseService

__all__ = ["BaseService"]
