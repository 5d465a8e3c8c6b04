from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum


@dataclass(frozen=True)
class CategoryRule:
    name: str
    shelf_life_days: int
    temperature_range: str  # display text, e.g. "0-4°C"

    def __post_init__(self):
        if not self.name:
            raise ValueError("category name must not be empty")
        if isinstance(self.shelf_life_days, bool) or not isinstance(self.shelf_life_days, int):
            raise ValueError(f"shelf life for {self.name!r} must be an integer")
        if self.shelf_life_days <= 0:
            raise ValueError(f"shelf life for {self.name!r} must be positive")


@dataclass(frozen=True)
class LabelRecord:
    id: str
    product_name: str
    category: str
    shelf_life_days: int  # frozen at print time
    temperature_range: str  # frozen at print time
    production_date: date
    expiry_date: date
    printed_at: datetime


class ExpiryStatus(str, Enum):
    EXPIRED = "expired"
    EXPIRING_SOON = "expiring_soon"
    FRESH = "fresh"
