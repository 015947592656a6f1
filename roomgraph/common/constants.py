from __future__ import annotations

ROOM_NAMES = (
    "Basement",
    "Attic",
    "Ballroom",
    "Dining",
    "Kitchen",
    "Library",
    "Bathroom",
    "Bedroom",
    "Trophy",
    "Study",
)

NUM_ROOMS = 7
MIN_CONNECTIONS = 3
MAX_CONNECTIONS = 6
MAX_NAME_CHARS = 8

ROOMS_DIR_PREFIX = "rooms."
ROOM_FILE_SUFFIX = "_room"
TIME_FILE = "currentTime.txt"
TRANSCRIPT_PREFIX = "tmpfile."

TIME_COMMAND = "time"
