from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from datetime import date, datetime
from typing import Callable, Optional

from ..attendance.classifier import PunchClassifier
from ..attendance.day_records import LocalDayRecords
from ..attendance.model import AttendancePunch
from ..attendance.repository import AttendanceStore
from ..common.datetime_utils import format_clock_time, now_local
from ..common.validators import require_latitude, require_longitude
from ..core.constants import DEFAULT_RESULT_RESET_SECONDS, STICKY_BRANCH_KEY
from ..core.enums import GeoErrorCode, PunchType, TerminalState
from ..core.exceptions import InvalidTransitionError, RemoteStoreError, ValidationError
from ..geofence.evaluator import GeofenceEvaluator
from ..geofence.model import GeofenceResult
from ..geofence.provider import ReportedPositionProvider
from ..presence.broadcaster import PresenceBroadcaster
from ..shifts.catalog import ShiftCatalog
from ..shops.model import ShopLocation
from ..shops.registry import ShopRegistry
from ..staff.model import StaffMember
from ..staff.service import CredentialService
from ..storage.local_store import LocalStore
from ..sync.connectivity import ConnectivityMonitor
from ..sync.queue import OfflinePunchQueue
from ..sync.reconciler import SyncReconciler, SyncReport
from .scheduler import Scheduler, TimerHandle

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TerminalConfig:
    """Static configuration handed to the terminal at construction."""

    shops: ShopRegistry
    shifts: ShiftCatalog
    result_reset_s: float = DEFAULT_RESULT_RESET_SECONDS


@dataclass(frozen=True)
class PunchResult:
    punch_type: PunchType
    punch: AttendancePunch
    saved_locally: bool

    @property
    def message(self) -> str:
        label = "Clock In" if self.punch_type == PunchType.IN else "Clock Out"
        if self.saved_locally:
            return f"{label} saved locally. Will sync when online."
        return f"{label} recorded: {self.punch.status.value}"

    def to_dict(self) -> dict:
        return {
            "type": self.punch_type.value,
            "saved_locally": self.saved_locally,
            "message": self.message,
            "record": self.punch.to_payload(),
        }


class TerminalStateMachine:
    """Kiosk flow: branch-setup -> authenticating -> session-active -> result.

    Independent of any UI framework; the Flask controller only forwards
    actions. Out-of-range is a blocking overlay on session-active, not a
    state of its own.
    """

    def __init__(
        self,
        config: TerminalConfig,
        *,
        device_store: LocalStore,
        credentials: CredentialService,
        geofence: GeofenceEvaluator,
        positions: ReportedPositionProvider,
        classifier: PunchClassifier,
        attendance: AttendanceStore,
        queue: OfflinePunchQueue,
        reconciler: SyncReconciler,
        connectivity: ConnectivityMonitor,
        presence: PresenceBroadcaster,
        scheduler: Scheduler,
        clock: Callable[[], datetime] = now_local,
    ):
        self._config = config
        self._device_store = device_store
        self._day_records = LocalDayRecords(device_store)
        self._credentials = credentials
        self._geofence = geofence
        self._positions = positions
        self._classifier = classifier
        self._attendance = attendance
        self._queue = queue
        self._reconciler = reconciler
        self._connectivity = connectivity
        self._presence = presence
        self._scheduler = scheduler
        self._clock = clock
        self._lock = threading.RLock()

        self.state = TerminalState.BRANCH_SETUP
        self.shop: Optional[ShopLocation] = None
        self.staff: Optional[StaffMember] = None
        self.geofence_result: Optional[GeofenceResult] = None
        self.shift_label: Optional[str] = None
        self.last_result: Optional[PunchResult] = None
        self.last_sync: Optional[SyncReport] = None
        self._reset_timer: Optional[TimerHandle] = None

        self._connectivity.subscribe(self._on_connectivity_change)

    # -- branch ------------------------------------------------------------

    def boot(self, *, branch: Optional[str] = None, lat=None, lng=None) -> TerminalState:
        """Entry point for `/terminal?branch=..[&lat=..&lng=..]` (printed QR codes)."""
        with self._lock:
            if branch and self._config.shops.get(branch):
                self._reset_to_setup()
                self.select_branch(branch, lat=lat, lng=lng)
            elif self.shop is None:
                self._restore_sticky_branch()

        if self._connectivity.online:
            self.sync()
        return self.state

    def _restore_sticky_branch(self) -> None:
        saved = self._device_store.get_json(STICKY_BRANCH_KEY)
        if not saved:
            return
        shop = self._config.shops.get(saved.get("shop_id"))
        if not shop:
            logger.warning("Ignoring unknown saved branch %r", saved.get("shop_id"))
            return
        if saved.get("lat") is not None and saved.get("lng") is not None:
            shop = self._config.shops.with_coordinates(shop.shop_id, saved["lat"], saved["lng"])
        self.shop = shop
        self.state = TerminalState.AUTHENTICATING

    def select_branch(self, shop_id: str, *, lat=None, lng=None) -> ShopLocation:
        with self._lock:
            self._require(TerminalState.BRANCH_SETUP)
            if lat not in (None, "") and lng not in (None, ""):
                shop = self._config.shops.with_coordinates(shop_id, lat, lng)
                sticky = {"shop_id": shop.shop_id, "lat": shop.latitude, "lng": shop.longitude}
            else:
                shop = self._config.shops.require(shop_id)
                sticky = {"shop_id": shop.shop_id}
            self._device_store.set_json(STICKY_BRANCH_KEY, sticky)
            self.shop = shop
            self.state = TerminalState.AUTHENTICATING
            logger.info("Terminal branch set to %s", shop.shop_id)
            return shop

    def switch_branch(self) -> None:
        with self._lock:
            self._reset_to_setup()
            self._device_store.delete(STICKY_BRANCH_KEY)

    def _reset_to_setup(self) -> None:
        self._cancel_reset_timer()
        self._end_session()
        self.last_result = None
        self.shop = None
        self.state = TerminalState.BRANCH_SETUP

    # -- session -----------------------------------------------------------

    def authenticate(self, employee_id: str, pin: str) -> StaffMember:
        with self._lock:
            self._require(TerminalState.AUTHENTICATING)
            staff = self._credentials.authenticate(employee_id, pin, online=self._connectivity.online)
            self.staff = staff
            self.shift_label = None
            self.state = TerminalState.SESSION_ACTIVE
            self._presence.start(staff)
            self._check_location()
            return staff

    def end_session(self) -> None:
        with self._lock:
            self._require(TerminalState.SESSION_ACTIVE)
            self._end_session()
            self.state = TerminalState.AUTHENTICATING

    def _end_session(self) -> None:
        self._presence.stop()
        self.staff = None
        self.shift_label = None
        self.geofence_result = None

    def select_shift(self, label: str) -> str:
        with self._lock:
            self._require(TerminalState.SESSION_ACTIVE)
            self.shift_label = self._config.shifts.get(label).label
            return self.shift_label

    # -- location ----------------------------------------------------------

    def report_position(self, lat, lng, accuracy_m: Optional[float] = None) -> Optional[GeofenceResult]:
        with self._lock:
            self._positions.report(require_latitude(lat), require_longitude(lng), accuracy_m)
            if self.state == TerminalState.SESSION_ACTIVE:
                return self._check_location()
            return None

    def report_position_error(self, code: GeoErrorCode) -> Optional[GeofenceResult]:
        with self._lock:
            self._positions.report_error(code)
            if self.state == TerminalState.SESSION_ACTIVE:
                return self._check_location()
            return None

    def retry_location(self) -> GeofenceResult:
        with self._lock:
            self._require(TerminalState.SESSION_ACTIVE)
            return self._check_location()

    def _check_location(self) -> GeofenceResult:
        result = self._geofence.check(self._positions, self.shop)
        self.geofence_result = result
        if result.in_range:
            self._presence.publish(result.position)
        return result

    def _require_in_range(self) -> GeofenceResult:
        result = self.geofence_result
        if result is None or not result.in_range:
            if result is not None and result.distance_m is not None:
                raise ValidationError(f"Out of range ({result.distance_m}m)")
            raise ValidationError("Location unavailable, retry GPS")
        return result

    # -- punches -----------------------------------------------------------

    def clock_in(self) -> PunchResult:
        with self._lock:
            self._require(TerminalState.SESSION_ACTIVE)
            geofence = self._require_in_range()
            if not self.shift_label:
                raise ValidationError("Select a shift first")
            now = self._clock()
            punch = self._classifier.clock_in(
                staff=self.staff,
                shop=self.shop,
                shift_label=self.shift_label,
                now=now,
                existing=self._day_record(self.staff.employee_id, now.date()),
                position=geofence.position,
            )
            return self._finish(self._write(PunchType.IN, punch))

    def clock_out(self) -> PunchResult:
        with self._lock:
            self._require(TerminalState.SESSION_ACTIVE)
            geofence = self._require_in_range()
            now = self._clock()
            punch = self._classifier.clock_out(
                staff=self.staff,
                shop=self.shop,
                now=now,
                existing=self._day_record(self.staff.employee_id, now.date()),
                position=geofence.position,
            )
            return self._finish(self._write(PunchType.OUT, punch))

    def _day_record(self, employee_id: str, work_date: date) -> Optional[AttendancePunch]:
        """Remote row for the day, then this device's accepted and queued punches on top."""
        record = None
        if self._connectivity.online:
            try:
                record = self._attendance.query_attendance(employee_id, work_date)
            except RemoteStoreError as e:
                logger.warning("Could not fetch today's record for %s: %s", employee_id, e)
        local = self._day_records.get(employee_id, work_date)
        if local:
            record = record.merge(local) if record else local
        for queued in self._queue.pending_for(employee_id, work_date):
            record = record.merge(queued.punch) if record else queued.punch
        return record

    def _write(self, punch_type: PunchType, punch: AttendancePunch) -> PunchResult:
        with self._queue.lock:
            # Earlier punches for the same day still queued: go behind them.
            behind_queue = bool(self._queue.pending_for(punch.employee_id, punch.work_date))
            if self._connectivity.online and not behind_queue:
                try:
                    self._attendance.upsert_attendance(punch)
                except RemoteStoreError as e:
                    logger.warning("Remote write failed for %s, queueing locally: %s", punch.ref_id, e)
                else:
                    self._day_records.remember(punch)
                    return PunchResult(punch_type, punch, saved_locally=False)
            self._queue.enqueue(punch_type, punch)
            self._day_records.remember(punch)

        if self._connectivity.online and behind_queue:
            report = self.sync()
            if not any(q.punch.key == punch.key for q in self._queue.list()):
                return PunchResult(punch_type, punch, saved_locally=False)
            logger.info("Punch %s still pending after sync (%d pending)", punch.ref_id, report.pending)
        return PunchResult(punch_type, punch, saved_locally=True)

    def _finish(self, result: PunchResult) -> PunchResult:
        logger.info("%s %s: %s", result.punch_type.value, result.punch.ref_id, result.message)
        self._end_session()
        self.last_result = result
        self.state = TerminalState.RESULT
        self._cancel_reset_timer()
        self._reset_timer = self._scheduler.call_later(self._config.result_reset_s, self._auto_return)
        return result

    # -- result ------------------------------------------------------------

    def dismiss(self) -> None:
        with self._lock:
            self._require(TerminalState.RESULT)
            self._cancel_reset_timer()
            self.state = TerminalState.AUTHENTICATING

    def _auto_return(self) -> None:
        with self._lock:
            self._reset_timer = None
            if self.state == TerminalState.RESULT:
                self.state = TerminalState.AUTHENTICATING

    def _cancel_reset_timer(self) -> None:
        if self._reset_timer is not None:
            self._reset_timer.cancel()
            self._reset_timer = None

    # -- connectivity ------------------------------------------------------

    def set_online(self, online: bool) -> bool:
        return self._connectivity.set_online(online)

    def _on_connectivity_change(self, online: bool) -> None:
        if online:
            self.sync()

    def sync(self) -> SyncReport:
        report = self._reconciler.drain()
        self.last_sync = report
        return report

    # -- view --------------------------------------------------------------

    def _require(self, *states: TerminalState) -> None:
        if self.state not in states:
            allowed = ", ".join(s.value for s in states)
            raise InvalidTransitionError(f"Action not allowed in state {self.state.value} (needs {allowed})")

    def snapshot(self) -> dict:
        with self._lock:
            shop = self.shop
            return {
                "state": self.state.value,
                "clock": format_clock_time(self._clock()),
                "online": self._connectivity.online,
                "shop": {"id": shop.shop_id, "name": shop.name} if shop else None,
                "staff": self.staff.to_dict() if self.staff else None,
                "shift": self.shift_label,
                "shifts": [s.to_dict() for s in self._config.shifts.list_all()],
                "geofence": self.geofence_result.to_dict() if self.geofence_result else None,
                "result": self.last_result.to_dict() if self.state == TerminalState.RESULT and self.last_result else None,
                "pending_sync": self._queue.count(),
            }
