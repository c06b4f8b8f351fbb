"""Data models for the Recruiter Productivity Ranking."""

from dataclasses import dataclass
from datetime import date
from typing import Optional
from src.config import CLOSED_STATUSES, MIN_DAYS_TO_CLOSE, PODIUM_SIZE


@dataclass(frozen=True)
class Recruiter:
    id: str
    name: str


@dataclass(frozen=True)
class Requisition:
    id: str
    recruiter_id: str
    status: str
    request_date: Optional[date] = None
    close_date: Optional[date] = None

    @property
    def is_closed(self) -> bool:
        return self.status.strip().lower() in CLOSED_STATUSES

    @property
    def has_both_dates(self) -> bool:
        return self.request_date is not None and self.close_date is not None

    @property
    def days_to_close(self) -> Optional[int]:
        """Whole days from request to close, never less than one day."""
        if not self.has_both_dates:
            return None
        return max((self.close_date - self.request_date).days, MIN_DAYS_TO_CLOSE)


@dataclass(frozen=True)
class RecruiterAggregate:
    identifier: str
    display_name: str
    closed_count: int
    average_days_to_close: Optional[float] = None


@dataclass(frozen=True)
class RankedRecruiter:
    identifier: str
    display_name: str
    closed_count: int
    average_days_to_close: Optional[float]
    score: float
    position: int

    @classmethod
    def from_aggregate(cls, aggregate: RecruiterAggregate, score: float, position: int) -> "RankedRecruiter":
        return cls(
            identifier=aggregate.identifier,
            display_name=aggregate.display_name,
            closed_count=aggregate.closed_count,
            average_days_to_close=aggregate.average_days_to_close,
            score=score,
            position=position
        )

    @property
    def aggregate(self) -> RecruiterAggregate:
        return RecruiterAggregate(
            identifier=self.identifier,
            display_name=self.display_name,
            closed_count=self.closed_count,
            average_days_to_close=self.average_days_to_close
        )

    @property
    def is_podium(self) -> bool:
        return self.position <= PODIUM_SIZE
