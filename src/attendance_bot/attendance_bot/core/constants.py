"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

NOT_APPLICABLE = "N/A"
HOLIDAY_NOTE = "Holiday reported by student"

DEFAULT_AI_TIMEOUT_SECONDS = 120
DEFAULT_LOW_ATTENDANCE_THRESHOLD = 75.0
DEFAULT_COUNTRY_CODE = "91"
DEFAULT_CHAT_MODEL = "gpt-4o-mini"
DEFAULT_VISION_MODEL = "gpt-4o"

MAX_IMAGE_SIDE = 1800
ROLL_NUMBER_PREFIX = "WA"
