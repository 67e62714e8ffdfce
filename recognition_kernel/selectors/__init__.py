"""Read-only selectors and pagination value objects."""

from recognition_kernel.selectors.base import BaseSelector, Page, PageRequest

__all__ = ["BaseSelector", "Page", "PageRequest"]
