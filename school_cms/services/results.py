"""
Per-entity outcome values shared by the export and import tools.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class EntityStatus(str, Enum):
    OK = "ok"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class EntityResult:
    entity: str
    operation: str
    status: EntityStatus
    count: int = 0
    error: Optional[str] = None

    def describe(self) -> str:
        if self.status == EntityStatus.OK:
            return f"{self.operation} {self.entity}: {self.count}"
        return f"{self.operation} {self.entity}: {self.status.value} ({self.error})"
