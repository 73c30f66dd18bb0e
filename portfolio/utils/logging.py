# =============================================
# File: portfolio/utils/logging.py
# Purpose: Loguru file sink for service-level logs
# =============================================
import os

from loguru import logger

LOG_FILE = os.getenv("LOG_FILE", "logs/app.log")

logger.add(LOG_FILE, rotation="10 MB", level=os.getenv("LOG_LEVEL", "INFO").upper())
