from __future__ import annotations

from typing import Any, Dict, Optional


class BackofficeError(Exception):
    """Base class for domain errors raised by the back-office core."""

    code: str = "BACKOFFICE_ERROR"

    def __init__(self, message: str, meta: Optional[Dict[str, Any]] = None):
        self.message = str(message)
        self.meta = meta or {}
        super().__init__(self.message)


class NotFoundError(BackofficeError):
    """
    A referenced record does not exist (product, client profile, order).
    Terminal for the request: callers surface it, nobody retries.
    """

    code = "NOT_FOUND"

    def __init__(self, entity: str, identifier: Any, message: Optional[str] = None):
        self.entity = str(entity)
        self.identifier = identifier
        super().__init__(
            message or f"{self.entity} with ID {identifier} not found",
            {"entity": self.entity, "id": str(identifier)},
        )
