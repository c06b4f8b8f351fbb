"""Configuration constants for the Recruiter Productivity Ranking."""

import os
from datetime import date

TODAY = date.today()

# Productivity index
SCORE_SCALE = 100
INSTANT_CLOSE_MULTIPLIER = 10000
SCORE_DECIMALS = 2
MIN_DAYS_TO_CLOSE = 1

# Rolling window (days), never a calendar month
ROLLING_WINDOW_DAYS = int(os.environ.get("RANKING_WINDOW_DAYS", "28"))

CLOSED_STATUSES = {"cerrada", "closed"}
OPEN_STATUSES = {"abierta", "open"}
CANCELLED_STATUSES = {"cancelada", "cancelled", "canceled"}
KNOWN_STATUSES = CLOSED_STATUSES | OPEN_STATUSES | CANCELLED_STATUSES

PODIUM_SIZE = 3
PODIUM_BADGES = {
    1: "🏆",
    2: "🥈",
    3: "🥉"
}

DEFAULT_DISPLAY_NAME = "Reclutador"

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

SAMPLE_REQUISITIONS_PATH = os.environ.get("REQUISITIONS_PATH", "requisitions.json")
SAMPLE_RECRUITERS_PATH = os.environ.get("RECRUITERS_PATH", "recruiters.json")
