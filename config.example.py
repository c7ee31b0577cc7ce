# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
This file exists to make the repo self-documenting even without opening .env.example.
"""

ENV_VARS = {
    # App / logging
    "TASKLIST_APP_NAME": "App display name (default: tasklist).",
    "TASKLIST_LOG_LEVEL": "Logging level for the log file (default: INFO).",
    # Paths (gitignored)
    "TASKLIST_DATA_DIR": "Local data directory, also holds tasklist.log (default: .local/tasklist).",
    "TASKLIST_STORAGE_DIR": "Key/value store directory (default: <data_dir>/store).",
    # Persistence / view
    "TASKLIST_STORAGE_KEY": "Key the whole task list is saved under (default: tasks).",
    "TASKLIST_DEFAULT_FILTER": "Initial listing: all | pending | completed (default: all).",
}
