"""
Purpose: Core data models for the drivers domain.
What it does:
Defines the structure of a shuttle Driver and their status without relying on any storage layer.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from routing.models import GeoPoint


class DriverStatus(str, Enum):
    """
    Standardizes the state a driver can be in.
    """
    AVAILABLE = "available"
    EN_ROUTE = "enRoute"
    OFFLINE = "offline"


@dataclass(frozen=True)
class Driver:
    """
    A purely stateless representation of a Driver at a specific point in time.
    Live location updates produce a new instance via dataclasses.replace.
    """
    id: str
    name: str
    surname: str
    location: GeoPoint
    status: DriverStatus = DriverStatus.AVAILABLE

    @property
    def full_name(self) -> str:
        return f"{self.name} {self.surname}"

    @classmethod
    def new(
        cls,
        driver_id: str,
        name: str,
        surname: str,
        lat: float,
        lng: float,
        status: str | DriverStatus = DriverStatus.AVAILABLE,
    ) -> Driver:
        if isinstance(status, str):
            status = DriverStatus(status)

        return cls(
            id=driver_id,
            name=name,
            surname=surname,
            location=GeoPoint(lat, lng),
            status=status,
        )
