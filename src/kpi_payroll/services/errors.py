"""Service-level errors."""

from __future__ import annotations


class NotFoundError(Exception):
    """Raised when a referenced record does not exist."""

    def __init__(self, entity: str, entity_id: str):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} {entity_id} not found")
