# studentshelf/utils.py
"""Shared utilities: logging setup and the clock helpers used for listing ids and dates."""
import os
import logging
import time
from datetime import date
from dotenv import load_dotenv

load_dotenv()

def get_logger(name=__name__):
    level = os.getenv("LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        format="%(asctime)s | %(levelname)-7s | %(name)s | %(message)s",
        level=getattr(logging, level, logging.INFO)
    )
    return logging.getLogger(name)

logger = get_logger("studentshelf")

def now_millis() -> int:
    return time.time_ns() // 1_000_000

def listing_date(day: date | None = None) -> str:
    # en-IN short date: D/M/YYYY, no zero padding
    day = day or date.today()
    return f"{day.day}/{day.month}/{day.year}"
