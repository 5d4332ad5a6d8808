"""Errors raised by the reconciliation engine and its ports."""

from __future__ import annotations


class ReconciliationError(RuntimeError):
    """Base class for reconciliation failures."""


class CollaboratorError(ReconciliationError):
    """Raised by port implementations when a call to a remote system fails."""


class IntegrityViolation(ReconciliationError):
    """A metric carries a status the backend state machine should never produce."""

    def __init__(self, metric_name: str, status: str) -> None:
        super().__init__(
            f"metric {metric_name!r} has unexpected status {status!r} "
            "(expected 'active' or 'available')"
        )
        self.metric_name = metric_name
        self.status = status


class QueryModeError(ReconciliationError):
    """A check bundle could not be processed during a query-mode run."""

    def __init__(self, message: str, *, check_bundle_cid: str | None = None) -> None:
        super().__init__(message)
        self.check_bundle_cid = check_bundle_cid
