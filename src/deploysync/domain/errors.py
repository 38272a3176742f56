"""Errors raised by the reconciliation core."""

from __future__ import annotations


class ReconciliationError(RuntimeError):
    """Base class for reconciliation failures."""


class InvalidEventError(ReconciliationError, ValueError):
    """Raised when an inbound event violates the input contract."""


class MalformedReferenceError(ReconciliationError, ValueError):
    """Raised when a digest-pinned image reference cannot be derived."""


class CollaboratorUnavailableError(ReconciliationError):
    """Raised when an external collaborator failed or timed out."""


class StoreUnavailableError(CollaboratorUnavailableError):
    """Raised when the record store could not serve a request.

    ``orphaned_image_id`` is set when an image record was created but the owning
    deployment could not be pointed at it.
    """

    def __init__(self, message: str, *, orphaned_image_id: str | None = None) -> None:
        super().__init__(message)
        self.orphaned_image_id = orphaned_image_id


class ClusterUnavailableError(CollaboratorUnavailableError):
    """Raised when the cluster-control API could not serve a request."""
