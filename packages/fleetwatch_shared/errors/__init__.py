"""Public shared error API for fleetwatch components."""

from . import codes
from .factories import (
    authentication_error,
    dependency_error,
    internal_error,
    validation_error,
)
from .types import ErrorCategory, ErrorDetail

__all__ = [
    "ErrorCategory",
    "ErrorDetail",
    "authentication_error",
    "codes",
    "dependency_error",
    "internal_error",
    "validation_error",
]
