"""Currency entity — an ISO-like currency known to the system."""

from dataclasses import dataclass


@dataclass
class Currency:
    id: int | None
    code: str
    name: str
    symbol: str | None = None
