"""
Exception types shared by services and routers.
"""


class LeafyError(Exception):
    """Base class for application errors."""


class RowStoreError(LeafyError):
    """A row store query or mutation failed. Carries the database message."""

    def __init__(self, table: str, message: str):
        self.table = table
        self.message = message
        super().__init__(f"{table}: {message}")


class NotFoundError(LeafyError):
    """A referenced entity does not exist."""

    def __init__(self, entity: str, entity_id: str):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} not found: {entity_id}")
