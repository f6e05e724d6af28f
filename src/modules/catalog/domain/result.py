"""Explicit success/failure result for catalog operations.

Public client methods unwrap this to a plain list; loaders read the status to
decide whether to surface an error.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class FetchStatus(str, Enum):
    SUCCESS = "success"
    EMPTY = "empty"  # succeeded, no data
    FAILED = "failed"


@dataclass
class FetchResult[T]:
    status: FetchStatus
    items: list[T] = field(default_factory=list)
    error_message: str | None = None
    duration_ms: int = 0
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def is_success(self) -> bool:
        return self.status in (FetchStatus.SUCCESS, FetchStatus.EMPTY)

    @property
    def items_count(self) -> int:
        return len(self.items)

    @classmethod
    def success(
        cls,
        items: list[T],
        duration_ms: int = 0,
        metadata: dict[str, Any] | None = None,
    ) -> "FetchResult[T]":
        status = FetchStatus.EMPTY if not items else FetchStatus.SUCCESS
        return cls(
            status=status,
            items=items,
            duration_ms=duration_ms,
            metadata=metadata or {},
        )

    @classmethod
    def failed(
        cls,
        error_message: str,
        duration_ms: int = 0,
        metadata: dict[str, Any] | None = None,
    ) -> "FetchResult[T]":
        return cls(
            status=FetchStatus.FAILED,
            items=[],
            error_message=error_message,
            duration_ms=duration_ms,
            metadata=metadata or {},
        )
