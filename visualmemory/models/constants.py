"""Constants for VisualMemory.

This module centralizes the Dynamic Priority Score (DPS) tuning values.
These are product-tuned numbers: change them only with product input.
"""

from datetime import timedelta


# Task defaults
DEFAULT_CATEGORY = "Personal"
DEFAULT_DURATION_MINUTES = 30
ONBOARDING_DEFAULT_DURATION_MINUTES = 15

# Base priority score per tier
BASE_PRIORITY_SCORES = {
    "high": 100.0,
    "medium": 60.0,
    "low": 30.0,
}
UNKNOWN_BASE_PRIORITY_SCORE = 50.0

# Frequency weight (less frequent = bigger deal to miss)
FREQUENCY_WEIGHTS = {
    "daily": 0.7,
    "weekly": 1.0,
    "monthly": 1.3,
    "yearly": 1.5,
    "once": 1.4,
}
UNKNOWN_FREQUENCY_WEIGHT = 1.0

# Urgency multiplier
NO_DUE_DATE_MULTIPLIER = 0.5
OVERDUE_BASE_MULTIPLIER = 10.0
OVERDUE_MINUTES_PER_STEP = 10.0
OVERDUE_MAX_BONUS = 20.0  # caps overdue multiplier at 30x

# (upper bound of remaining time, multiplier), checked in order
URGENCY_BRACKETS = (
    (timedelta(minutes=5), 8.0),
    (timedelta(minutes=15), 5.0),
    (timedelta(minutes=30), 3.5),
    (timedelta(hours=1), 2.5),
    (timedelta(hours=2), 1.8),
    (timedelta(hours=4), 1.4),
    (timedelta(hours=24), 1.1),
)
DISTANT_DUE_MULTIPLIER = 1.0

# Danger zone window: due within 30 minutes, but not more than 24h overdue
DANGER_ZONE_LEAD = timedelta(minutes=30)
DANGER_ZONE_OVERDUE_FLOOR = timedelta(hours=24)

# Low-stakes routine activities never shown in the danger zone
ROUTINE_KEYWORDS = (
    "bathroom",
    "brush teeth",
    "watch tv",
    "shower",
    "bath",
    "wash face",
    "floss",
    "use restroom",
    "get dressed",
    "wake up",
    "go to bed",
    "skincare",
    "meditate",
    "relax",
)

# Score-based urgency bands (lower bound, band name), checked in order
SCORE_URGENCY_BANDS = (
    (800.0, "critical"),
    (500.0, "very_high"),
    (300.0, "high"),
    (150.0, "medium"),
    (50.0, "low"),
)

# Onboarding recurrence anchors never go past the 28th
MAX_ANCHOR_DAY_OF_MONTH = 28
