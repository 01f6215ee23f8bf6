"""Shared error code constants.

These constants are intended for stable machine-readable handling across
components. Component-specific codes live next to the component that raises
them.
"""

# Validation
VALIDATION_ERROR = "VALIDATION_ERROR"
INVALID_ARGUMENT = "INVALID_ARGUMENT"
PAYLOAD_TOO_LARGE = "PAYLOAD_TOO_LARGE"

# Authentication
UNAUTHENTICATED = "UNAUTHENTICATED"

# Dependency / external system
DEPENDENCY_FAILURE = "DEPENDENCY_FAILURE"
DEPENDENCY_UNAVAILABLE = "DEPENDENCY_UNAVAILABLE"

# Internal
INTERNAL_ERROR = "INTERNAL_ERROR"
UNEXPECTED_EXCEPTION = "UNEXPECTED_EXCEPTION"
