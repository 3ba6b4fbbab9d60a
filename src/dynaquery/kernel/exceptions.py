"""Unified exception hierarchy for dynaquery.

All library exceptions inherit from DynaQueryException, enabling unified
error handling across modules.

Categories:
- BusinessException: Domain rule violations, validation errors
- InfrastructureException: Schema and storage failures

Storage engine failures are not wrapped: ``StoreError`` is SQLAlchemy's own
base error, so driver and transaction failures reach the caller untouched.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy.exc import SQLAlchemyError

StoreError = SQLAlchemyError


# =============================================================================
# Base Exception
# =============================================================================


class DynaQueryException(Exception):
    """Base exception for all dynaquery errors.

    Carries an optional error code and context dict for structured error data.

    Args:
        message: Human-readable error description.
        code: Machine-readable error code (e.g. "COERCION_001").
        context: Arbitrary key-value pairs for error context and debugging.
    """

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.context: dict = context if context is not None else {}


# =============================================================================
# Business Exceptions
# =============================================================================


class BusinessException(DynaQueryException):
    """Domain rule violations and business logic errors."""


class ValidationException(BusinessException):
    """Input validation failures."""


class ResourceNotFoundException(BusinessException):
    """Requested resource does not exist."""


class ConflictException(BusinessException):
    """Operation conflicts with current state (e.g. duplicate key)."""


class ValueCoercionError(ValidationException):
    """Raw text could not be converted into an attribute's native type."""

    def __init__(self, target_type: Any, value: Any) -> None:
        type_name = getattr(target_type, "__name__", str(target_type))
        super().__init__(
            f"Cannot coerce {value!r} to {type_name}",
            code="COERCION_FAILED",
            context={"type": type_name, "value": value},
        )


class NotFoundError(ResourceNotFoundException):
    """No record with the given key exists."""

    def __init__(self, record_type: type, key: Any) -> None:
        super().__init__(
            f"{record_type.__name__} with key {key!r} not found",
            code="NOT_FOUND",
            context={"record_type": record_type.__name__, "key": key},
        )


class ConflictError(ConflictException):
    """A record with the same key already exists."""

    def __init__(self, record_type: type, key: Any) -> None:
        super().__init__(
            f"{record_type.__name__} with key {key!r} already exists",
            code="CONFLICT",
            context={"record_type": record_type.__name__, "key": key},
        )


# =============================================================================
# Infrastructure Exceptions
# =============================================================================


class InfrastructureException(DynaQueryException):
    """Infrastructure failures: schema metadata, storage."""


class SchemaError(InfrastructureException):
    """Record type metadata is unusable (not mapped, no primary key)."""
