from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


def normalize_employee_id(value: str) -> str:
    """Employee ids are case-insensitive; store and compare them upper-cased."""
    return value.strip().upper()


@dataclass(frozen=True)
class StaffMember:
    """Authenticated staff identity held by an active terminal session."""

    employee_id: str
    name: str
    home_shop: Optional[str] = None

    def to_dict(self) -> dict:
        return {"employee_id": self.employee_id, "name": self.name, "home_shop": self.home_shop}


@dataclass(frozen=True)
class StaffCredential:
    """Remote staff row: identity plus secret PIN."""

    employee_id: str
    name: str
    pin: str
    home_shop: Optional[str] = None

    def member(self) -> StaffMember:
        return StaffMember(employee_id=self.employee_id, name=self.name, home_shop=self.home_shop)
