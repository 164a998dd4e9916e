"""Exception types raised by the template miner."""

from __future__ import annotations


class LoggingDrainError(Exception):
    """Base class for all errors raised by this package."""

    base_message = "logging drain error"

    def __init__(self, detail: str | None = None, cause: BaseException | None = None):
        self.detail = detail
        self.cause = cause
        parts = []
        if cause is not None:
            parts.append(str(cause))
        if detail:
            parts.append(detail)
        parts.append(self.base_message)
        super().__init__(": ".join(parts))
        if cause is not None:
            self.__cause__ = cause


class MaskPatternError(LoggingDrainError):
    """A masking pattern could not be compiled."""

    base_message = "compile mask pattern error"


class InternalError(LoggingDrainError):
    """An internal inconsistency or a failure of a backing service."""

    base_message = "internal error"


def mask_pattern_error(
    cause: BaseException | None = None, detail: str | None = None
) -> MaskPatternError:
    """Build a MaskPatternError wrapping ``cause`` with an optional detail."""
    return MaskPatternError(detail=detail, cause=cause)


def internal_error(
    cause: BaseException | None = None, detail: str | None = None
) -> InternalError:
    """Build an InternalError wrapping ``cause`` with an optional detail."""
    return InternalError(detail=detail, cause=cause)