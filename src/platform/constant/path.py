from pathlib import Path


# Repository root
BASE_DIR = Path(__file__).resolve().parent.parent.parent.parent

# Hourly rotated log files (DEBUG only)
LOG_DIR = BASE_DIR / 'logs'
