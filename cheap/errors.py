"""Exception hierarchy and error codes used throughout the package."""

from __future__ import annotations

from enum import IntEnum


class ErrorCode(IntEnum):
    """Numeric error codes reported by the spectral routines."""

    EINVAL = -1
    ENOMEM = -2
    ENOCONV = -3
    EDOM = -4
    EUNINIT = -5


_MESSAGES = {
    ErrorCode.EINVAL: "cheap: invalid argument",
    ErrorCode.ENOMEM: "cheap: memory allocation failed",
    ErrorCode.ENOCONV: "cheap: Sinkhorn did not converge",
    ErrorCode.EDOM: "cheap: NaN/Inf in input data",
    ErrorCode.EUNINIT: "cheap: context not initialized",
}


def _default_message(code: int | None) -> str:
    if code is None:
        return "cheap: error"
    try:
        return _MESSAGES[ErrorCode(code)]
    except (ValueError, KeyError):
        return f"cheap: unknown error ({int(code)})"


class CheapError(Exception):
    """Base class of every error raised by the package."""

    default_code: ErrorCode | None = None

    def __init__(self, message: str | None = None, *, code: int | None = None):
        if code is None:
            code = self.default_code
        elif not isinstance(code, ErrorCode):
            try:
                code = ErrorCode(code)
            except ValueError:
                code = int(code)
        if message is None:
            message = _default_message(code)
        super().__init__(message)
        self.code = code


class InvalidArgumentError(CheapError, ValueError):
    """An argument is out of its allowed range."""

    default_code = ErrorCode.EINVAL


class NotConvergedError(CheapError, RuntimeError):
    """An iterative method reached its iteration limit without converging."""

    default_code = ErrorCode.ENOCONV


class DomainError(CheapError, ValueError):
    """Input data contains NaN or infinite values."""

    default_code = ErrorCode.EDOM


class UninitializedError(CheapError, RuntimeError):
    """A context was used after it was closed."""

    default_code = ErrorCode.EUNINIT


_CLASSES = {
    ErrorCode.EINVAL: InvalidArgumentError,
    ErrorCode.ENOCONV: NotConvergedError,
    ErrorCode.EDOM: DomainError,
    ErrorCode.EUNINIT: UninitializedError,
}


def error_for(code: int) -> CheapError:
    """Return the exception instance that corresponds to an error code."""
    try:
        known = ErrorCode(code)
    except ValueError:
        return CheapError(code=int(code))
    cls = _CLASSES.get(known, CheapError)
    return cls(code=known)