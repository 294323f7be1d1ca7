"""Default configuration constants for the bookkeeping history engine."""

# Logging level for the Streamlit app
LOG_LEVEL = "INFO"

# Linear undo/redo history
MAX_HISTORY_SIZE = 100  # Oldest undo entries beyond this are dropped

# Audit timeline
EVENT_ID_PREFIX = "evt_"
UNDO_DESCRIPTION_PREFIX = "Undo: "
REDO_DESCRIPTION_PREFIX = "Redo: "

# Description verbs -> audit action name (checked in order)
DESCRIPTION_VERBS = [
    ("Add ", "ADDED"),
    ("Edit ", "MODIFIED"),
    ("Delete ", "DELETED"),
    ("Update ", "MODIFIED"),
]

# Relevance scoring tiers (higher = more relevant)
NO_MATCH = -1
SCORE_EXACT = 1000
SCORE_PREFIX = 950
SCORE_WORD_START = 900
SCORE_SUBSTRING = 800
FUZZY_SCALE = 700        # Fuzzy similarity (0..1) is multiplied by this
FUZZY_THRESHOLD = 0.4    # Minimum normalized similarity for a fuzzy match

# Version history view
ACTION_FILTERS = ["All", "Added", "Modified", "Deleted", "Undone"]
ENTITY_TYPE_ALL = "All"
TIME_FORMAT = "%I:%M %p"
DATE_FORMAT_SHORT = "%b %d"
DATE_FORMAT_LONG = "%b %d, %Y"

# Record list view
ENTITY_TYPES = ["Customer", "Supplier", "Product", "Employee"]
RECORD_SEARCH_FIELDS = ["name", "email", "phone", "record_id"]
RECORD_SEARCH_COLUMNS = ["Name", "Email", "Phone", "ID"]
RECORD_ID_PREFIXES = {
    "Customer": "CUS",
    "Supplier": "SUP",
    "Product": "PRD",
    "Employee": "EMP",
}
