"""Configuration settings for the file server."""

import os


ROOT_DIR_DATA = os.environ.get("ROOT_DIR_DATA", "./data")

FILE_SERVER_HOST = os.environ.get("FILE_SERVER_HOST", "0.0.0.0")

FILE_SERVER_PORT = int(os.environ.get("PORT", "32109"))

TMP_SWEEP_INTERVAL_SECONDS = float(os.environ.get("TMP_SWEEP_INTERVAL_SECONDS", "0"))

TMP_MAX_AGE_SECONDS = float(os.environ.get("TMP_MAX_AGE_SECONDS", "86400"))

IGNORED_LOG_PATHS = ("/status", "/front/health-status", "/ready")
