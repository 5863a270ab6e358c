"""
Exception classes for LightBnB data access.

Errors raised by the database driver are propagated unchanged; these cover
the in-memory store's constraint checks and configuration problems.
"""

from typing import Optional


class LightBnBError(Exception):
    """Base exception class."""

    def __init__(self, detail: str, error_code: Optional[str] = None):
        super().__init__(detail)
        self.detail = detail
        self.error_code = error_code


class ConstraintViolationError(LightBnBError):
    """A uniqueness or foreign key rule was broken by a write."""

    def __init__(self, detail: str, constraint: Optional[str] = None):
        super().__init__(detail, error_code="CONSTRAINT_VIOLATION")
        self.constraint = constraint


class StoreNotConfiguredError(LightBnBError):
    """The requested storage backend is unknown or missing its resources."""

    def __init__(self, detail: str):
        super().__init__(detail, error_code="STORE_NOT_CONFIGURED")
