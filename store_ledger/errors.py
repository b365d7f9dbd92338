"""
Error kinds raised by the ledger core.

All of them derive from DomainError so a boundary can catch one type and show
the message as-is (toast/snackbar/status line).
"""
from __future__ import annotations


class DomainError(Exception):
    """Domain-level error the caller can surface directly."""
    pass


class ValidationError(DomainError):
    """Malformed or incomplete input; nothing was mutated."""
    pass


class NotFoundError(DomainError, KeyError):
    """An id that is absent from the catalog or the entry store."""

    def __str__(self) -> str:
        # KeyError.__str__ would repr() the message
        return str(self.args[0]) if self.args else ""


class PersistenceError(DomainError):
    """
    Durable storage failed (unavailable, locked, corrupt record).

    The in-memory mutation that triggered the save is NOT rolled back.
    """
    pass


__all__ = ["DomainError", "ValidationError", "NotFoundError", "PersistenceError"]
