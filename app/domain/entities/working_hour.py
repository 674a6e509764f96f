"""WorkingHour entity — one weekday of an office's weekly schedule."""

from dataclasses import dataclass
from datetime import time

from app.domain.value_objects.enums import DayOfWeek


@dataclass
class WorkingHour:
    id: int | None
    office_id: int | None
    day_of_week: DayOfWeek
    is_active: bool
    from_time: time | None
    to_time: time | None
    has_break: bool = False
    break_from_time: time | None = None
    break_to_time: time | None = None

    def has_break_window(self) -> bool:
        return (
            self.has_break
            and self.break_from_time is not None
            and self.break_to_time is not None
        )
