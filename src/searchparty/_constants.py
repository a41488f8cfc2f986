"""Internal constants shared across the library."""

BASE_URL = "https://firestore.googleapis.com"
DEFAULT_DATABASE = "(default)"
USER_AGENT = "searchparty/1"

# ------------------------------------------------------------------
# Document layout
# ------------------------------------------------------------------

PARTIES_COLLECTION = "search_parties"
LIVE_LOCATIONS_COLLECTION = "live_locations"
HISTORY_COLLECTION = "location_history"

TIMESTAMP_FIELD = "timestamp"
PARTICIPANT_FIELD = "participant_id"

# ------------------------------------------------------------------
# Cadences and heatmap defaults
# ------------------------------------------------------------------

DEFAULT_SAMPLE_INTERVAL_S = 15.0
DEFAULT_PRESENCE_INTERVAL_S = 15.0
DEFAULT_HEATMAP_INTERVAL_S = 30.0

DEFAULT_WINDOW_MS = 60 * 60 * 1000
MIN_INTENSITY = 0.1
MAX_INTENSITY = 0.8
LIVE_INTENSITY = 1.0

#: Page size used when listing live locations.
LIST_PAGE_SIZE = 300
#: Ceiling for a single history range query.
HISTORY_QUERY_LIMIT = 5000
