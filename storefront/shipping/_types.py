"""
Shipping types — zones, carriers and the options offered at checkout.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum


class ShippingZone(Enum):
    UK = "UK"
    EU = "EU"
    NA = "NA"
    ROW = "ROW"


@dataclass(frozen=True, slots=True)
class ShippingRate:
    """A carrier's price for one method into one zone."""

    method: str
    zone: ShippingZone
    cost: Decimal
    min_days: int
    max_days: int

    @property
    def estimated_delivery(self) -> str:
        if self.min_days == self.max_days:
            unit = "business day" if self.min_days == 1 else "business days"
            return f"{self.min_days} {unit}"
        return f"{self.min_days}-{self.max_days} business days"


@dataclass(frozen=True, slots=True)
class Carrier:
    id: str
    name: str
    rates: tuple[ShippingRate, ...] = ()


@dataclass(frozen=True, slots=True)
class ShippingOption:
    """What the buyer picks; `cost` feeds compute_order_totals()."""

    carrier_id: str
    carrier_name: str
    method: str
    cost: Decimal
    estimated_delivery: str


__all__ = ("ShippingZone", "ShippingRate", "Carrier", "ShippingOption")
