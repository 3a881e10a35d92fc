"""Exceptions raised by the scheduling analysis and simulation library."""


class SchedSimError(Exception):
    """Base class for all library errors."""


class DivisionByZero(SchedSimError, ZeroDivisionError):
    """Raised when a rational operation would divide by zero."""

    def __init__(self, message: str = "cannot divide by 0") -> None:
        super().__init__(message)


class MalformedRationalString(SchedSimError, ValueError):
    """Raised when a string cannot be parsed as a rational number."""


class TypeMismatch(SchedSimError, TypeError):
    """Raised when an operand is neither a Rational nor a plain number."""


class NonTerminatingIdle(SchedSimError, RuntimeError):
    """Raised when the simulator is idle and no future instant can change state.

    Without a strictly positive advance the simulation loop would never make
    progress, so the run is aborted instead.
    """
