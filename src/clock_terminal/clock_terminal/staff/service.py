from __future__ import annotations

import logging
from concurrent.futures import Executor, Future
from typing import Optional

from ..common.validators import require_non_empty
from ..core.constants import INVALID_CREDENTIALS_MESSAGE
from ..core.exceptions import AuthenticationError, RemoteStoreError
from .cache import CredentialCache
from .model import StaffMember, normalize_employee_id
from .repository import StaffDirectory

logger = logging.getLogger(__name__)


class CredentialService:
    """Use case: authenticate a (staff id, PIN) pair.

    Remote first while online; the cached roster is used when offline or when
    the remote lookup errors. Every failure reaches the user as the same
    "Invalid ID or PIN" message; only the logs tell the causes apart.
    """

    def __init__(self, directory: StaffDirectory, cache: CredentialCache, *, executor: Optional[Executor] = None):
        self._directory = directory
        self._cache = cache
        self._executor = executor

    def authenticate(self, employee_id: str, pin: str, *, online: bool) -> StaffMember:
        employee_id = normalize_employee_id(require_non_empty(employee_id, "Staff ID"))
        # PINs compare exactly: validate presence, keep the raw string
        require_non_empty(pin, "PIN")

        if online:
            try:
                staff = self._directory.lookup_staff(employee_id, pin)
            except RemoteStoreError as e:
                logger.warning("Remote staff lookup failed, using cached roster: %s", e)
            else:
                if staff is None:
                    logger.info("Rejected %s: wrong credentials (remote)", employee_id)
                    raise AuthenticationError(INVALID_CREDENTIALS_MESSAGE)
                self.refresh_in_background()
                return staff.member()

        return self._authenticate_cached(employee_id, pin)

    def _authenticate_cached(self, employee_id: str, pin: str) -> StaffMember:
        member = self._cache.match(employee_id, pin)
        if member:
            logger.info("Authenticated %s from cached roster", employee_id)
            return member

        if self._cache.is_empty():
            logger.warning("Rejected %s: staff cache is empty", employee_id)
        elif not self._cache.contains(employee_id):
            logger.warning("Rejected %s: not in cached roster (refreshed %s)", employee_id, self._cache.refreshed_at)
        else:
            logger.info("Rejected %s: wrong credentials (cache)", employee_id)
        raise AuthenticationError(INVALID_CREDENTIALS_MESSAGE)

    def refresh_cache(self) -> int:
        """Replace the local roster snapshot with the remote one."""
        staff = self._directory.list_staff()
        count = self._cache.replace(staff)
        logger.info("Staff cache refreshed (%d entries)", count)
        return count

    def refresh_in_background(self) -> Optional[Future]:
        if self._executor is None:
            return None
        future = self._executor.submit(self.refresh_cache)
        future.add_done_callback(_log_refresh_failure)
        return future


def _log_refresh_failure(future: Future) -> None:
    error = future.exception()
    if error is not None:
        logger.warning("Background staff cache refresh failed: %s", error)
