from __future__ import annotations

from enum import Enum


class PunchType(str, Enum):
    """Clock-in or clock-out."""

    IN = "in"
    OUT = "out"


class PunchStatus(str, Enum):
    """Status labels written to the attendance table (payroll reads these verbatim)."""

    ON_TIME = "On Time"
    LATE = "Late Arrival"
    SHIFT_ENDED = "Shift Ended"


class TerminalState(str, Enum):
    BRANCH_SETUP = "branch-setup"
    AUTHENTICATING = "authenticating"
    SESSION_ACTIVE = "session-active"
    RESULT = "result"


class GeoErrorCode(str, Enum):
    """Why a device position could not be obtained."""

    PERMISSION_DENIED = "permission_denied"
    TIMEOUT = "timeout"
    UNSUPPORTED = "unsupported"
    UNAVAILABLE = "unavailable"
