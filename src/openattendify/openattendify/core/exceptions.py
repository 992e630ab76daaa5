from __future__ import annotations

from typing import Any, Optional


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class ConflictError(DomainError):
    """Raised when a local invariant would be violated (double check-in, check-out without session)."""


class NotFoundError(DomainError):
    """Raised when an entity does not exist or is not visible to the caller."""


class InvalidActionError(DomainError):
    """Raised for an unknown task action token."""


class SyncError(DomainError):
    """Base class for ERP synchronization failures.

    These never abort a local operation; the message is stored on the
    attendance row as ``sync_error``.
    """


class ConnectivityError(SyncError):
    """Network failure, timeout, non-2xx status or undecodable payload."""

    def __init__(self, endpoint: str, cause: Any):
        self.endpoint = endpoint
        self.cause = cause
        super().__init__(f"could not reach ERP at {endpoint}: {cause}")


class ErpAuthError(SyncError):
    """The ERP rejected the configured credentials."""


class ErpConfigError(SyncError):
    """The integration or the local employee lacks data the sync needs."""


class ErpNotFoundError(SyncError):
    """A remote record the sync depends on does not exist."""

    def __init__(self, message: str, *, details: Optional[dict] = None):
        self.details = dict(details or {})
        if self.details:
            rendered = ", ".join(f"{k}={v}" for k, v in self.details.items())
            message = f"{message} ({rendered})"
        super().__init__(message)


class ErpRemoteError(SyncError):
    """The ERP answered with a JSON-RPC error member."""
