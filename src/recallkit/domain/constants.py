"""Centralized constants for recallkit.

Scheduling defaults and storage identifiers live here so every layer
imports from a single source of truth.
"""

# ---------- SM-2 ----------
INITIAL_EASINESS_FACTOR = 2.5
MIN_EASINESS_FACTOR = 1.3
SUCCESS_GRADE = 3
MIN_GRADE = 0
MAX_GRADE = 5

# ---------- Scheduling ----------
DEFAULT_DAILY_NEW_LIMIT = 10
ONE_DAY_MS = 24 * 60 * 60 * 1000

# ---------- Persistence ----------
DEFAULT_STORAGE_KEY = "hungarian-learning-storage"
SNAPSHOT_VERSION = 0
