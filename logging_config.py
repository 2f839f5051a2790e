# logging_config.py

import logging
import sqlite3
from datetime import datetime, timezone
import os

LOG_DB_PATH = os.getenv("LOG_DB_PATH", "logs.db")
MAX_LOG_ENTRIES = 10000  # Maximum number of log entries to keep
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class SQLiteHandler(logging.Handler):
    """Persists relay log records so failed page updates can be inspected later."""

    def __init__(self, db_path=LOG_DB_PATH, max_entries=MAX_LOG_ENTRIES):
        super().__init__()
        self.db_path = db_path
        self.max_entries = max_entries
        self.create_table()

    def create_table(self):
        """Creates the logs table if it doesn't exist."""
        conn = sqlite3.connect(self.db_path)
        try:
            cursor = conn.cursor()
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS logs (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    timestamp TEXT NOT NULL,
                    level TEXT NOT NULL,
                    logger TEXT,
                    message TEXT NOT NULL,
                    module TEXT,
                    exception TEXT
                )
            """)
            cursor.execute("""
                CREATE INDEX IF NOT EXISTS idx_logs_id ON logs (id DESC)
            """)
            conn.commit()
        finally:
            conn.close()

    def emit(self, record):
        """Inserts a log record and trims the table down to max_entries."""
        conn = None
        try:
            if record.exc_info and not record.exc_text:
                record.exc_text = logging.Formatter().formatException(record.exc_info)

            log_entry = {
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "level": record.levelname,
                "logger": record.name,
                "message": record.getMessage(),
                "module": record.module,
                "exception": record.exc_text,
            }

            conn = sqlite3.connect(self.db_path)
            cursor = conn.cursor()
            cursor.execute("""
                INSERT INTO logs (timestamp, level, logger, message, module, exception)
                VALUES (:timestamp, :level, :logger, :message, :module, :exception)
            """, log_entry)

            cursor.execute("SELECT COUNT(*) FROM logs")
            count = cursor.fetchone()[0]
            if count > self.max_entries:
                excess = count - self.max_entries
                cursor.execute("""
                    DELETE FROM logs
                    WHERE id IN (
                        SELECT id FROM logs
                        ORDER BY id ASC
                        LIMIT ?
                    )
                """, (excess,))

            conn.commit()
        except Exception:
            self.handleError(record)
        finally:
            if conn is not None:
                conn.close()


def setup_logging(debug_mode: bool = False, db_path: str = LOG_DB_PATH):
    logger = logging.getLogger()
    level = logging.DEBUG if debug_mode else logging.INFO
    logger.setLevel(level)

    # Calling setup_logging again only adjusts levels.
    for handler in logger.handlers:
        if getattr(handler, "_relay_handler", False):
            handler.setLevel(level)
            return

    # Console handler for real-time logs
    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    console_handler._relay_handler = True
    logger.addHandler(console_handler)

    # SQLite handler for persistent logs
    sqlite_handler = SQLiteHandler(db_path=db_path, max_entries=MAX_LOG_ENTRIES)
    sqlite_handler.setLevel(level)
    sqlite_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    sqlite_handler._relay_handler = True
    logger.addHandler(sqlite_handler)

    # Keep request-level chatter from the HTTP client out of the log table.
    logging.getLogger("urllib3").setLevel(logging.WARNING)
