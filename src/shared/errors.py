"""Error taxonomy shared by the Ledger and Tracking domains.

Every failure a write operation can surface belongs to one ``ErrorKind``.
Each error carries structured context (order id, shortfall, statuses) so
callers never have to parse a message to decide what happened.

Domain errors extend Protean's exceptions so that Protean's FastAPI
integration and ``pytest.raises(ValidationError)`` keep working; the API
layer registers more specific handlers for the kinds below.
"""

from enum import Enum

from protean.exceptions import ObjectNotFoundError, ValidationError


class ErrorKind(Enum):
    NOT_FOUND = "NotFound"
    INVALID_STATE = "InvalidState"
    INSUFFICIENT_FUNDS = "InsufficientFunds"
    INVALID_TRANSITION = "InvalidTransition"
    STORAGE_ERROR = "StorageError"
    NOTIFICATION_ERROR = "NotificationError"


class NotFound(ObjectNotFoundError):
    """A referenced order, wallet, partner or tracking record does not exist."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, entity: str, identifier: str):
        self.entity = entity
        self.identifier = str(identifier)
        super().__init__(f"{entity} `{identifier}` does not exist")

    @property
    def context(self) -> dict:
        return {"entity": self.entity, "identifier": self.identifier}


class InvalidState(ValidationError):
    """Operation attempted against an order or tracking in an ineligible state."""

    kind = ErrorKind.INVALID_STATE

    def __init__(self, reason: str, field: str = "status", **context):
        self.reason = reason
        self.field = field
        self._context = context
        super().__init__({field: [reason]})

    @property
    def context(self) -> dict:
        return {"reason": self.reason, **self._context}


class InsufficientFunds(ValidationError):
    """Wallet balance is lower than the requested debit."""

    kind = ErrorKind.INSUFFICIENT_FUNDS

    def __init__(self, user_id: str, balance: float, required: float):
        self.user_id = str(user_id)
        self.balance = balance
        self.required = required
        self.needed = round(required - balance, 2)
        super().__init__({"balance": [f"Insufficient wallet balance. Add {self.needed:.2f} to proceed."]})

    @property
    def context(self) -> dict:
        return {
            "user_id": self.user_id,
            "balance": self.balance,
            "required": self.required,
            "needed": self.needed,
        }


class InvalidTransition(ValidationError):
    """A tracking status change that would move the shipment backwards."""

    kind = ErrorKind.INVALID_TRANSITION

    def __init__(self, current: str, target: str):
        self.current = current
        self.target = target
        super().__init__({"status": [f"Cannot transition from {current} to {target}"]})

    @property
    def context(self) -> dict:
        return {"current": self.current, "target": self.target}


class StorageError(Exception):
    """The underlying persistence layer failed (network, constraint, timeout)."""

    kind = ErrorKind.STORAGE_ERROR

    def __init__(self, operation: str, cause: Exception | None = None):
        self.operation = operation
        self.cause = cause
        super().__init__(f"Storage failure during {operation}: {cause}")

    @property
    def context(self) -> dict:
        return {"operation": self.operation, "cause": str(self.cause) if self.cause else None}
