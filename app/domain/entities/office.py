"""Office entity — an exchange office with a physical location."""

from dataclasses import dataclass, field
from datetime import datetime

from app.domain.entities.office_rate import OfficeRate
from app.domain.entities.working_hour import WorkingHour
from app.domain.value_objects.geo_point import GeoPoint


@dataclass
class Office:
    id: int | None
    name: str
    address: str
    location: GeoPoint | None = None
    is_active: bool = True
    is_verified: bool = False
    is_featured: bool = False
    created_at: datetime | None = None
    rates: list[OfficeRate] = field(default_factory=list)
    working_hours: list[WorkingHour] = field(default_factory=list)
    city: str | None = None
    country: str | None = None
    state: str | None = None
    slug: str | None = None
    email: str | None = None
    primary_phone_number: str | None = None
    secondary_phone_number: str | None = None
    third_phone_number: str | None = None
    whatsapp_number: str | None = None

    def active_rates(self) -> list[OfficeRate]:
        return [r for r in self.rates if r.is_active]
