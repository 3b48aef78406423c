from dataclasses import dataclass
from datetime import date
from enum import Enum


class TrendDirection(str, Enum):
    UP = "up"
    DOWN = "down"
    STABLE = "stable"


@dataclass(frozen=True)
class DayRollup:
    """Statistics for all documents uploaded on one calendar date."""

    date: date
    document_count: int
    average_confidence: float
    authentic: int = 0
    suspicious: int = 0
    fraudulent: int = 0


@dataclass(frozen=True)
class TrendReport:
    rollups: tuple[DayRollup, ...]
    direction: TrendDirection

    @classmethod
    def empty(cls) -> "TrendReport":
        return cls(rollups=(), direction=TrendDirection.STABLE)

    @property
    def is_empty(self) -> bool:
        return not self.rollups


@dataclass(frozen=True)
class TrendInsights:
    """History-wide figures shown next to the daily trend."""

    document_count: int
    overall_average_confidence: float
    authentic_share: float
    authentic: int
    suspicious: int
    fraudulent: int
    blockchain_verified: int
