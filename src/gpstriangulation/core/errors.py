"""
Error kinds raised by the distance and matching code.

The API layer maps these onto HTTP status codes (see `gpstriangulation.api.routes`);
the CLI maps them onto exit codes.
"""

from __future__ import annotations

from typing import Any


class GpsTriangulationError(Exception):
    """Base class for all domain errors."""


class ValidationError(GpsTriangulationError, ValueError):
    """A request was malformed. Carries every violation, not just the first."""

    def __init__(self, errors: list[str]):
        self.errors = list(errors)
        super().__init__("\n".join(self.errors))


class FieldExtractionError(GpsTriangulationError, ValueError):
    """A record lacks a coordinate key, or its value is not a number."""

    def __init__(self, key: str, value: Any = None, *, missing: bool = False):
        self.key = key
        self.value = value
        self.missing = missing
        if missing:
            message = f"Record has no '{key}' field."
        else:
            message = f"Field '{key}' has non-numeric value {value!r}."
        super().__init__(message)


class ConvergenceError(GpsTriangulationError, ArithmeticError):
    """Vincenty's iteration did not settle within the iteration cap."""

    def __init__(self, point1: Any, point2: Any, max_iterations: int):
        self.point1 = point1
        self.point2 = point2
        self.max_iterations = max_iterations
        super().__init__(
            f"Vincenty formula failed to converge after {max_iterations} iterations "
            f"({point1} -> {point2}); points are likely near-antipodal."
        )
