"""Errors raised by the delivery-fee pricing engine."""

from __future__ import annotations


class ShippingError(Exception):
    """Base class for pricing failures. ``code`` is exposed on the API."""

    code = "SHIPPING_ERROR"


class InvalidCoordinate(ShippingError, ValueError):
    code = "INVALID_COORDINATE"


class MissingParameter(ShippingError, ValueError):
    code = "MISSING_PARAMETER"


class BranchNotFound(ShippingError, LookupError):
    code = "BRANCH_NOT_FOUND"


class BranchCoordinatesMissing(ShippingError):
    code = "BRANCH_COORDINATES_MISSING"


class NoBranchAvailable(ShippingError, LookupError):
    code = "NO_BRANCH_AVAILABLE"


class RepositoryFailure(ShippingError):
    """Data access failed; distinct from "no data"."""

    code = "REPOSITORY_FAILURE"


class LoggingFailure(ShippingError):
    """Persisting a calculation for analytics failed. Never surfaced to callers."""

    code = "LOGGING_FAILURE"
