"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from datetime import time

# Entries created from the grid (cell edit, add line) start at this time of day.
DEFAULT_ENTRY_START = time(9, 0)

UNKNOWN_PROJECT = "Unknown Project"
UNNAMED_TASK = "Unnamed Task"
UNKNOWN_USER = "Unknown User"
