"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

EARTH_RADIUS_M = 6_371_000

DEFAULT_GEOFENCE_RADIUS_M = 1500
DEFAULT_GEO_TIMEOUT_SECONDS = 10
DEFAULT_RESULT_RESET_SECONDS = 5
DEFAULT_LATE_GRACE_MINUTES = 0
DEFAULT_PRESENCE_TTL_SECONDS = 60

# JavaScript getDay() numbering: 0 = Sunday.
WEEKLY_SHIFT_DAY_INDEX = 0

# Keys in the device-local key/value store
STAFF_SNAPSHOT_KEY = "staff_snapshot"
STICKY_BRANCH_KEY = "saved_branch"
DAY_RECORDS_KEY = "day_records"

INVALID_CREDENTIALS_MESSAGE = "Invalid ID or PIN"
