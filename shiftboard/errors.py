"""Exception types raised by the scheduling core."""

from __future__ import annotations


class ShiftboardError(Exception):
    """Base class for all shiftboard errors."""


class ValidationError(ShiftboardError):
    """Missing or malformed input on a request or rule submission."""


class StoreError(ShiftboardError):
    """The schedule store could not complete an operation."""


class StoreReadError(StoreError):
    pass


class StoreWriteError(StoreError):
    pass


class RequestNotFound(ShiftboardError):
    pass


class InvalidTransition(ShiftboardError):
    """A request status change that the lifecycle does not allow."""

    def __init__(self, request_id: str, status: str, action: str):
        self.request_id = request_id
        self.status = status
        self.action = action
        super().__init__(f"Cannot {action} request {request_id} while it is {status}")


class PermissionDenied(ShiftboardError):
    pass


class ConfirmationRequired(ShiftboardError):
    """A destructive step was attempted without explicit confirmation."""
