"""
Clinic Diagnosis API: Configuration
====================================
Centralised runtime settings. Loads overrides from the project-level .env file.
"""

import os
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

# ── Paths ───────────────────────────────────────────────────────────────
PROJECT_ROOT = Path(__file__).resolve().parent.parent

# ── Load .env ───────────────────────────────────────────────────────────
load_dotenv(PROJECT_ROOT / ".env")

API_VERSION = "1.0.0"

# ── Logging ─────────────────────────────────────────────────────────────
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
LOG_FILE: Optional[str] = os.getenv("LOG_FILE") or None

# ── Analysis inputs ─────────────────────────────────────────────────────
# Only the most recently created ready exams feed an analysis
READY_EXAM_LIMIT: int = int(os.getenv("READY_EXAM_LIMIT", "10"))

# ── Listing ─────────────────────────────────────────────────────────────
DEFAULT_PAGE_LIMIT: int = int(os.getenv("DEFAULT_PAGE_LIMIT", "20"))
MAX_PAGE_LIMIT: int = int(os.getenv("MAX_PAGE_LIMIT", "100"))

# ── HTTP ────────────────────────────────────────────────────────────────
CORS_ORIGINS: List[str] = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "*").split(",")
    if origin.strip()
]
