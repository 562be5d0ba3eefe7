# heston_mc/backend/core/config.py

import os

# General project config
PROJECT_NAME = "Heston MC"
API_VERSION = "1.0.0"

# Simulation defaults
TRACKING_LIMIT = int(os.getenv("HESTON_TRACKING_LIMIT", "1000"))   # full paths simulated before FAST phase
PATH_CAPACITY = int(os.getenv("HESTON_PATH_CAPACITY", "1000"))     # full paths kept for percentiles
DEFAULT_BATCH_SIZE = int(os.getenv("HESTON_BATCH_SIZE", "20"))
PREVIEW_PATHS_LIMIT = int(os.getenv("HESTON_PREVIEW_PATHS", "50"))

# Logging config
LOG_LEVEL = os.getenv("HESTON_LOG_LEVEL", "INFO")
