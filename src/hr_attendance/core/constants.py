"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_GRACE_MINUTES = 15
DEFAULT_ENTRY_TIME = "08:00"
DEFAULT_EXIT_TIME = "17:00"
DEFAULT_REQUIRED_HOURS = 8

# Auto checkout closes forgotten transactions this long after scheduled exit.
DEFAULT_CHECKOUT_OFFSET_MINUTES = 2 * 60

OVERTIME_RATE = 1.5
SALARY_DAYS_PER_MONTH = 30

EARTH_RADIUS_METERS = 6371000
DEFAULT_PROJECT_RADIUS_METERS = 200

# datetime.weekday(): Friday=4, Saturday=5
DEFAULT_WEEKEND_DAYS = (4, 5)

MAX_LOAN_INSTALLMENTS = 60
DEFAULT_HISTORY_LIMIT = 31
