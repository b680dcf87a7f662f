# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
See src/duenote/config.py for defaults and parsing.

This file exists to make the repo self-documenting even without opening .env.
"""

ENV_VARS = {
    # App / logging
    "DUENOTE_APP_NAME": "App display name (default: duenote).",
    "DUENOTE_LOG_LEVEL": "Console logging level (default: INFO). The log file always gets DEBUG.",
    "DUENOTE_TIMER_LOG_LEVEL": "Console level for reminder timer logs (default: WARNING).",
    "DUENOTE_LOG_FILE_MAX_KB": "Rotate <data_dir>/duenote.log at this size in KiB; 0 never rotates (default: 1024).",
    "DUENOTE_LOG_FILE_BACKUPS": "Rotated log files to keep (default: 3).",
    # Paths (gitignored)
    "DUENOTE_DATA_DIR": "Local data directory for the database and log file (default: .local/duenote).",
    "DUENOTE_TASKS_DB_PATH": "SQLite blob store path (default: <data_dir>/tasks.sqlite3).",
    "DUENOTE_TASKS_KEY": "Blob key holding the task list (default: tasks).",
    # Reminders
    "DUENOTE_REMINDER_LEAD_MINUTES": "Minutes before the due time a reminder fires (default: 1).",
    "DUENOTE_NOTIFICATIONS_ENABLED": "Grant notification permission (true/false, default: true).",
    # Loading policy
    "DUENOTE_SKIP_MALFORMED_RECORDS": (
        "Skip unreadable task records on startup instead of treating the whole list as corrupt "
        "(true/false, default: true)."
    ),
}
