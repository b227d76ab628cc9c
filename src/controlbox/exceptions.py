"""Exception types and parameter checks shared by signals and elements.

NaN and infinite values are not trapped as a separate error kind: they
propagate through every computation following IEEE floating-point rules.
The checks below are written as ``not (value > bound)`` so that a NaN
parameter is rejected at construction rather than slipping through.
"""


class ControlBoxError(Exception):
    """Base class for all controlbox errors."""


class InvalidParameter(ControlBoxError, ValueError):
    """A construction parameter violates its invariant."""


class InvalidTimeStep(ControlBoxError, ValueError):
    """A time step ``dt`` that is zero, negative or NaN was passed to step."""


def require_positive(name: str, value: float) -> float:
    """Return ``value`` as float, raising InvalidParameter unless > 0."""
    if not value > 0:
        raise InvalidParameter(f"{name} must be > 0, got {value!r}")
    return float(value)


def require_non_negative(name: str, value: float) -> float:
    """Return ``value`` as float, raising InvalidParameter unless >= 0."""
    if not value >= 0:
        raise InvalidParameter(f"{name} must be >= 0, got {value!r}")
    return float(value)


def check_time_step(dt: float) -> float:
    """Validate a step size before any state is touched."""
    if not dt > 0:
        raise InvalidTimeStep(f"dt must be > 0, got {dt!r}")
    return float(dt)
