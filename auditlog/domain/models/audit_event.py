"""Domain model for audit events and the value objects used to query them."""

import uuid
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, Generic, List, Optional, Tuple, TypeVar

from auditlog.domain.exceptions import InvalidSortError

T = TypeVar("T")


class Verb(str, Enum):
    """Recommended verb vocabulary. Verbs are stored as free strings; this list is not closed."""

    ACCESS = "access"
    VIEW = "view"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    BULK_DELETE = "bulk_delete"
    EXPORT = "export"
    LOGIN = "login"
    LOGOUT = "logout"
    PAYMENT = "payment"


# Verbs counted in their own dashboard bucket; everything else lands in "other".
STATS_VERBS: Tuple[Verb, ...] = (Verb.CREATE, Verb.UPDATE, Verb.DELETE, Verb.LOGIN)


@dataclass(frozen=True)
class AuditEvent:
    """
    Immutable record of who did what, to what, when.
    subject_type/subject_id are an advisory pointer; the log does not own the subject.
    """

    id: uuid.UUID
    verb: str
    description: str
    created_at: datetime
    actor_id: Optional[int] = None
    subject_type: Optional[str] = None
    subject_id: Optional[str] = None
    ip_address: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        """Structured representation for JSON logging."""
        return {
            "id": str(self.id),
            "actor_id": self.actor_id,
            "verb": self.verb,
            "description": self.description,
            "subject_type": self.subject_type,
            "subject_id": self.subject_id,
            "ip_address": self.ip_address,
            "metadata": self.metadata,
            "created_at": self.created_at.isoformat(),
        }


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"

    def flipped(self) -> "SortDirection":
        return SortDirection.DESC if self is SortDirection.ASC else SortDirection.ASC


SORTABLE_COLUMNS = frozenset(
    {"id", "created_at", "actor_id", "verb", "subject_type", "description", "ip_address"}
)


@dataclass(frozen=True)
class SortOrder:
    """Single-column sort. Default is newest first."""

    column: str = "created_at"
    direction: SortDirection = SortDirection.DESC

    def __post_init__(self) -> None:
        if self.column not in SORTABLE_COLUMNS:
            raise InvalidSortError(
                f"Cannot sort by '{self.column}'; allowed: {', '.join(sorted(SORTABLE_COLUMNS))}"
            )
        if not isinstance(self.direction, SortDirection):
            try:
                object.__setattr__(self, "direction", SortDirection(self.direction))
            except ValueError as e:
                raise InvalidSortError(f"Invalid sort direction '{self.direction}'") from e

    @property
    def descending(self) -> bool:
        return self.direction is SortDirection.DESC

    def toggled(self, column: str) -> "SortOrder":
        """Clicking the active column flips direction; clicking another column sorts it ascending."""
        if column == self.column:
            return SortOrder(column=self.column, direction=self.direction.flipped())
        return SortOrder(column=column, direction=SortDirection.ASC)


@dataclass(frozen=True)
class AuditFilters:
    """Optional, AND-combined list filters. Blank strings mean "not set"."""

    search: Optional[str] = None
    actor_id: Optional[int] = None
    verb: Optional[str] = None
    day: Optional[date] = None
    subject_type: Optional[str] = None

    def __post_init__(self) -> None:
        for name in ("search", "verb", "subject_type"):
            value = getattr(self, name)
            if value is not None:
                value = value.strip() or None
                object.__setattr__(self, name, value)

    @property
    def is_empty(self) -> bool:
        return all(
            v is None
            for v in (self.search, self.actor_id, self.verb, self.day, self.subject_type)
        )


@dataclass(frozen=True)
class Page(Generic[T]):
    """One page of results. Pages are 1-indexed; a page past the end has no items."""

    items: List[T]
    total: int
    page: int
    per_page: int

    @property
    def last_page(self) -> int:
        return max(1, -(-self.total // self.per_page))


@dataclass(frozen=True)
class StatsSnapshot:
    """Dashboard counters. All zero when the store is unavailable."""

    total: int = 0
    today: int = 0
    active_actors: int = 0
    error_logs: int = 0
    create_count: int = 0
    update_count: int = 0
    delete_count: int = 0
    login_count: int = 0
    other_count: int = 0

    @classmethod
    def empty(cls) -> "StatsSnapshot":
        return cls()
