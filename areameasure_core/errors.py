"""Exceptions shared by the measurement core."""
from __future__ import annotations


class ContractViolation(AssertionError):
    """Raised when a caller breaks a documented precondition.

    These are programming errors (finishing an empty shape, dragging a vertex
    of an unfinished shape, asking for the area of an open ring) and are never
    shown to the user.
    """


def require(condition: bool, message: str) -> None:
    if not condition:
        raise ContractViolation(message)


__all__ = ["ContractViolation", "require"]
