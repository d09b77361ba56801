"""Central place for column-name constants so loading, cleaning, summary
   and tests all stay in sync.

‼️  **Edit here once** if the monthly trip CSV schema changes.  All
    downstream code (including tests) should import from this module
    instead of hard-coding strings.  """

# ────────────────────────────────────────────────────────────────────────────
# Source columns (one row per trip in every monthly file)
# ────────────────────────────────────────────────────────────────────────────

RIDE_ID       = "ride_id"            # trip identifier, nominally unique
START_TS      = "started_at"         # trip start timestamp
END_TS        = "ended_at"           # trip end timestamp
START_STATION = "start_station_id"   # station id where the trip began
END_STATION   = "end_station_id"     # station id where the trip ended
RIDER_TYPE    = "member_casual"      # "member" or "casual"

REQUIRED_COLUMNS = [RIDE_ID, START_TS, END_TS, START_STATION, END_STATION, RIDER_TYPE]

# ────────────────────────────────────────────────────────────────────────────
# Derived columns added during cleaning
# ────────────────────────────────────────────────────────────────────────────

RIDE_LENGTH = "ride_length"   # seconds, ended_at - started_at
DAY_OF_WEEK = "day_of_week"   # ISO weekday, Monday = 1 ... Sunday = 7
WEEKDAY     = "wday"          # ordered categorical label Monday..Sunday
SOURCE_FILE = "source_file"   # name of the monthly file the row came from

# ────────────────────────────────────────────────────────────────────────────
# Domain values
# ────────────────────────────────────────────────────────────────────────────

MEMBER = "member"
CASUAL = "casual"
RIDER_TYPES = (MEMBER, CASUAL)

WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")

TEST_STATION_ID = 676   # internal / maintenance rides, never analysed
