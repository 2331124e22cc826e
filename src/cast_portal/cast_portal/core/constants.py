"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_TIME_ZONE = "Asia/Tokyo"

CHECK_IN_OPENS_BEFORE_MINUTES = 30
CHECK_IN_CLOSES_AFTER_END_MINUTES = 60

ONGOING_LEAD_MINUTES = 10
ONGOING_TRAIL_MINUTES = 15

CUSTOMER_PLACEHOLDER = "お客様"
CUSTOMER_MASK_SUFFIX = "***"

DEFAULT_UPCOMING_LIMIT = 10
DEFAULT_RESERVATION_LIST_LIMIT = 20
MAX_RESERVATION_LIST_LIMIT = 100

RECENT_ATTENDANCE_REQUESTS = 5
ATTENDANCE_REASON_MAX_LENGTH = 500

SETTLEMENT_RECENT_LIMIT = 25

DEFAULT_SCHEDULE_START_TIME = "10:00"
DEFAULT_SCHEDULE_END_TIME = "18:00"
DEFAULT_SCHEDULE_WINDOW_DAYS = 7
MAX_SCHEDULE_WINDOW_DAYS = 31
SCHEDULE_EDIT_LOCK_DAYS = 7

REGULAR_DESIGNATION = "regular"
TOTAL_DESIGNATION_LABEL = "総指名ランキング（フリー含む）"
REGULAR_DESIGNATION_LABEL = "本指名ランキング"
ACCESS_RANKING_LABEL = "アクセス数ランキング"
