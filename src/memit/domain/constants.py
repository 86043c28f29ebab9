"""Centralized constants for memit.

Scheduling numbers and persistence defaults live here so every layer
imports from a single source of truth.
"""

# ---------- SM-2 ----------
INITIAL_EASE_FACTOR = 2.5
MIN_EASE_FACTOR = 1.3
INITIAL_INTERVAL_DAYS = 1
SECOND_INTERVAL_DAYS = 6
PASSING_QUALITY = 3
MAX_QUALITY = 5

# ---------- Daily quotas ----------
DEFAULT_DAILY_NEW_CARDS = 20
DEFAULT_DAILY_TOTAL_LIMIT = 80

# ---------- Decks ----------
DEFAULT_DECK_COLOR = "#007AFF"

# ---------- Persistence ----------
DECKS_FILENAME = "memit_decks.json"
STATS_FILENAME = "memit_stats.json"
GLOBAL_STATS_KEY = "GlobalStats"

# ---------- Delimited-text import ----------
MAX_FIELD_LENGTH = 500
MAX_ROW_COUNT = 10000
HEADER_MARKERS = ("front", "back", "fronte", "retro")
