"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_TIMEZONE = "America/Los_Angeles"

# Matches what the keypad UI has always rendered, e.g. "01/31/2026, 08:00:00 AM".
DISPLAY_TIME_FORMAT = "%m/%d/%Y, %I:%M:%S %p"

PIN_LENGTH = 4
MIN_NAME_LENGTH = 2
MIN_PASSWORD_LENGTH = 6

# Column widths in database/schema.sql
MAX_NAME_LENGTH = 120
MAX_USERNAME_LENGTH = 80
MAX_NOTE_LENGTH = 500
MAX_IP_LENGTH = 64

DEFAULT_SESSION_TTL_MINUTES = 480
DEFAULT_AUTO_CLOCK_OUT_TIME = "19:00"
DEFAULT_AUTO_CLOCK_OUT_POLL_SECONDS = 60

AUTO_CLOCK_OUT_NOTE = "Automatic clock-out"
BULK_CLOCK_OUT_NOTE = "Bulk clock-out by admin"
ABSENT_NOTE = "Marked absent by admin"

ADMIN_TAG = "Admin"
DEFAULT_EMPLOYEE_TAGS = (
    "Admin",
    "Team Lead",
    "MX",
    "EG",
    "PH",
    "Closer",
    "Dialer",
    "New Agent",
)
