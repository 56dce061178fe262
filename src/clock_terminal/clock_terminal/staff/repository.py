from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import StaffCredential


class StaffDirectory(Protocol):
    """Remote staff roster.

    Implementations raise RemoteStoreError when the store cannot be reached.
    """

    def lookup_staff(self, employee_id: str, pin: str) -> Optional[StaffCredential]:
        raise NotImplementedError

    def list_staff(self) -> Sequence[StaffCredential]:
        raise NotImplementedError
