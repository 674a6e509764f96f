"""Domain enums — pure Python, no external dependencies."""

from enum import Enum


class RateDirection(str, Enum):
    """Which side of a two-way rate the office applies to the client."""

    BUY = "BUY"
    SELL = "SELL"


class DayOfWeek(str, Enum):
    # Declaration order matches datetime.weekday()
    MONDAY = "MONDAY"
    TUESDAY = "TUESDAY"
    WEDNESDAY = "WEDNESDAY"
    THURSDAY = "THURSDAY"
    FRIDAY = "FRIDAY"
    SATURDAY = "SATURDAY"
    SUNDAY = "SUNDAY"

    @classmethod
    def from_weekday(cls, weekday: int) -> "DayOfWeek":
        return list(cls)[weekday]


class SortPreference(str, Enum):
    NEAREST = "nearest"
    POPULAR = "popular"
    MOST_SEARCHED = "most_searched"
    DEFAULT = "default"


class SearchState(str, Enum):
    VALIDATING = "validating"
    RESOLVING_CURRENCY = "resolving_currency"
    QUERYING = "querying"
    EVALUATING_HOURS = "evaluating_hours"
    EVALUATING_RATES = "evaluating_rates"
    RANKING = "ranking"
    PAGINATING = "paginating"
    DONE = "done"
    FAILED = "failed"
