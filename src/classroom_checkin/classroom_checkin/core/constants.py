"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
All durations are whole seconds.
"""

DEFAULT_ROTATION_PERIOD = 60
DEFAULT_GRACE = 5
DEFAULT_TIMER_INTERVAL = 1

MIN_PASSWORD_LENGTH = 6

ACCOUNTS_STORAGE_KEY = "attendance.accounts"
COURSES_STORAGE_KEY = "attendance.courses"
SESSIONS_STORAGE_KEY = "attendance.sessions"
RECORDS_STORAGE_KEY = "attendance.records"

CSV_HEADERS = ("Session_Date", "Subject", "Student_ID", "Check_In_Time")
