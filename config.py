"""
Application configuration settings
"""
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import List, Optional

from dotenv import load_dotenv

load_dotenv()

# --- AI ---
GEMINI_API_KEY = os.getenv("GEMINI_API_KEY", "")
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")

# --- DATABASE ---
MONGO_URI = os.getenv("MONGO_URI", "mongodb://localhost:27017")
DB_NAME = os.getenv("DB_NAME", "mamaezen")
LMP_KEY = "mamaezen_lmp"

# --- WEB ---
SECRET_KEY = os.getenv("SECRET_KEY", "dev-only-change-me")
# Per-browser state (navigation, player, chats) is released after this much idle time
CLIENT_IDLE_TTL_S = float(os.getenv("CLIENT_IDLE_TTL_S", "1800"))

# --- LOGGING ---
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FILE = os.getenv("LOG_FILE")

# --- LOCATION ---
# Praça da Sé, São Paulo
DEFAULT_LATITUDE = -23.5505
DEFAULT_LONGITUDE = -46.6333
LOCATION_MAX_AGE_S = float(os.getenv("LOCATION_MAX_AGE_S", "10"))

# --- NAVIGATION ---
COMFORT_INTERVAL_S = float(os.getenv("COMFORT_INTERVAL_S", "30"))
COMFORT_DISPLAY_S = float(os.getenv("COMFORT_DISPLAY_S", "8"))
MAX_PLACE_RESULTS = 5
URBAN_SPEED_KMH = 30.0

# --- CRY ANALYZER ---
CLIP_SAMPLE_RATE = 22050
CLIP_SECONDS = 5
MAX_UPLOAD_BYTES = 10 * 1024 * 1024


def setup_logging(level: str = LOG_LEVEL, log_file: Optional[str] = LOG_FILE):
    """Configure root logging with optional rotating file output."""
    fmt = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    datefmt = "%H:%M:%S"

    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(
            RotatingFileHandler(log_file, maxBytes=5 * 1024 * 1024, backupCount=3, encoding="utf-8")
        )

    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=fmt,
                        datefmt=datefmt, handlers=handlers)
