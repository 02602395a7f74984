"""
Environment settings loaded from .env file.
"""
import os
from dotenv import load_dotenv

load_dotenv()


# --- Logging ---
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
DEBUG_BOUNDARY_DETECTION: bool = os.getenv("DEBUG_BOUNDARY_DETECTION", "false").lower() == "true"

# --- Parser ---
PARSE_CACHE_SIZE: int = int(os.getenv("PARSE_CACHE_SIZE", "16"))

# --- Metrics ---
METRICS_ENABLED: bool = os.getenv("METRICS_ENABLED", "true").lower() == "true"
