from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from .attendance.classifier import PunchClassifier
from .attendance.factory import PunchStrategyFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceStore
from .common.datetime_utils import now_local
from .database.connection import DBConfig, DatabaseConnection
from .geofence.evaluator import GeofenceEvaluator
from .geofence.provider import ReportedPositionProvider
from .presence.broadcaster import PresenceBroadcaster, PresenceRoster
from .presence.channel import InMemoryPresenceChannel
from .shifts.catalog import ShiftCatalog
from .shops.registry import ShopRegistry
from .staff.cache import CredentialCache
from .staff.mysql_staff_repository import MySQLStaffRepository
from .staff.repository import StaffDirectory
from .staff.service import CredentialService
from .storage.local_store import LocalStore
from .sync.connectivity import ConnectivityMonitor
from .sync.queue import OfflinePunchQueue
from .sync.reconciler import SyncReconciler
from .terminal.machine import TerminalConfig, TerminalStateMachine
from .terminal.scheduler import Scheduler, ThreadingScheduler


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    device_store: LocalStore
    shops: ShopRegistry
    shifts: ShiftCatalog

    staff_directory: StaffDirectory
    attendance_store: AttendanceStore
    credential_cache: CredentialCache
    credential_service: CredentialService

    queue: OfflinePunchQueue
    reconciler: SyncReconciler
    connectivity: ConnectivityMonitor

    presence_channel: InMemoryPresenceChannel
    presence_roster: PresenceRoster

    scheduler: Scheduler
    terminal: TerminalStateMachine


def build_container(
    settings,
    *,
    staff_directory: StaffDirectory | None = None,
    attendance_store: AttendanceStore | None = None,
    scheduler: Scheduler | None = None,
    clock: Callable[[], datetime] = now_local,
    background_refresh: bool = True,
) -> Container:
    """Wire the terminal from a settings module.

    The MySQL adapters are used unless a directory/store is passed in
    (tests pass in-memory fakes).
    """
    conn = None
    if staff_directory is None or attendance_store is None:
        conn = DatabaseConnection.get_instance(DBConfig.from_mapping(getattr(settings, "DB_CONFIG")))
    staff_directory = staff_directory or MySQLStaffRepository(conn)
    attendance_store = attendance_store or MySQLAttendanceRepository(conn)
    scheduler = scheduler or ThreadingScheduler()

    device_store = LocalStore(getattr(settings, "LOCAL_STORE_PATH"))
    shops = ShopRegistry.from_settings(getattr(settings, "SHOPS"))
    shifts = ShiftCatalog.from_settings(
        getattr(settings, "SHIFT_STARTS"),
        weekly_start=getattr(settings, "WEEKLY_SHIFT_START", "11:00"),
    )

    credential_cache = CredentialCache(device_store)
    executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="staff-cache") if background_refresh else None
    credential_service = CredentialService(staff_directory, credential_cache, executor=executor)

    queue = OfflinePunchQueue(device_store)
    reconciler = SyncReconciler(queue, attendance_store)
    connectivity = ConnectivityMonitor(online=True, probe=attendance_store.ping)

    presence_channel = InMemoryPresenceChannel(ttl_s=float(getattr(settings, "PRESENCE_TTL_SECONDS", 60)), clock=clock)
    presence_roster = PresenceRoster(presence_channel)

    terminal = TerminalStateMachine(
        TerminalConfig(
            shops=shops,
            shifts=shifts,
            result_reset_s=float(getattr(settings, "RESULT_RESET_SECONDS", 5)),
        ),
        device_store=device_store,
        credentials=credential_service,
        geofence=GeofenceEvaluator(
            radius_m=float(getattr(settings, "GEOFENCE_RADIUS_M", 1500)),
            timeout_s=float(getattr(settings, "GEO_TIMEOUT_SECONDS", 10)),
        ),
        positions=ReportedPositionProvider(clock=clock),
        classifier=PunchClassifier(
            shifts,
            strategy_factory=PunchStrategyFactory(),
            grace_minutes=int(getattr(settings, "LATE_GRACE_MINUTES", 0)),
        ),
        attendance=attendance_store,
        queue=queue,
        reconciler=reconciler,
        connectivity=connectivity,
        presence=PresenceBroadcaster(presence_channel, clock=clock),
        scheduler=scheduler,
        clock=clock,
    )

    return Container(
        conn=conn,
        device_store=device_store,
        shops=shops,
        shifts=shifts,
        staff_directory=staff_directory,
        attendance_store=attendance_store,
        credential_cache=credential_cache,
        credential_service=credential_service,
        queue=queue,
        reconciler=reconciler,
        connectivity=connectivity,
        presence_channel=presence_channel,
        presence_roster=presence_roster,
        scheduler=scheduler,
        terminal=terminal,
    )
