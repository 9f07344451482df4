"""
Domain exceptions raised by the data-access layer and the data transfer tools.
Routes translate these into HTTP responses; the CLI scripts into exit codes.
"""
from typing import Any, Optional


class SchoolCMSError(Exception):
    """Base class for all school CMS errors."""


class NotFoundError(SchoolCMSError):
    """The targeted record does not exist."""

    def __init__(self, entity: str, entity_id: Any):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} {entity_id} does not exist")


class InvalidReferenceError(SchoolCMSError):
    """A referenced record is missing or belongs somewhere else."""

    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")


class DuplicateAlbumError(SchoolCMSError):
    def __init__(self, title: str):
        self.title = title
        super().__init__(
            f'An album with the name "{title}" already exists for this type. Please use a different name.'
        )


class StoreUnavailableError(SchoolCMSError):
    """
    An entity is missing from the registry or a query against it failed.
    Export and import record this per entity and carry on.
    """

    def __init__(self, entity: str, reason: str, cause: Optional[BaseException] = None):
        self.entity = entity
        self.reason = reason
        self.cause = cause
        super().__init__(f"{entity}: {reason}")


class CorruptSnapshotError(SchoolCMSError):
    """The snapshot file could not be read or does not have the expected shape."""

    def __init__(self, path: Any, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot import {path}: {reason}")
