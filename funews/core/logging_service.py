"""
Centralized logging service for FU News.
Persists structured log entries to SQLite so admins can review backend
failures from the ops page.
"""

import os
import sqlite3
import json
import logging
import traceback
from datetime import datetime, timedelta
from flask import request, has_request_context, session
from .config import get_config_value

logger = logging.getLogger(__name__)


def _log_db_path():
    return get_config_value('LOG_DB', 'app_logs.db')


class LoggingService:
    """Centralized logging service for application-wide logging"""

    @staticmethod
    def _connect():
        db_path = _log_db_path()
        db_dir = os.path.dirname(db_path)
        if db_dir:
            os.makedirs(db_dir, exist_ok=True)
        return sqlite3.connect(db_path)

    @staticmethod
    def _ensure_logs_table():
        """Ensure the app_logs table exists"""
        with LoggingService._connect() as conn:
            cursor = conn.cursor()
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS app_logs (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    timestamp TEXT NOT NULL,
                    level TEXT NOT NULL,
                    source TEXT NOT NULL,
                    message TEXT NOT NULL,
                    details TEXT,
                    request_path TEXT,
                    account_id TEXT
                )
            """)
            cursor.execute("""
                CREATE INDEX IF NOT EXISTS idx_logs_timestamp
                ON app_logs(timestamp DESC)
            """)
            conn.commit()

    @staticmethod
    def _get_request_context():
        """Extract request path and signed-in account, if any"""
        if not has_request_context():
            return None, None
        return request.path, session.get('account_id')

    @staticmethod
    def log(level, source, message, details=None, account_id=None):
        """
        Log a message to the database

        Args:
            level (str): Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            source (str): Source component (api, auth, trash, etc.)
            message (str): Main log message
            details (str/dict): Additional details (JSON-encoded if dict)
            account_id: Optional account identifier, defaults to the session account
        """
        logger.log(getattr(logging, level.upper(), logging.INFO), "[%s] %s", source, message)
        try:
            LoggingService._ensure_logs_table()

            request_path, session_account = LoggingService._get_request_context()
            if account_id is None:
                account_id = session_account

            if isinstance(details, dict):
                details = json.dumps(details, indent=2, default=str)

            with LoggingService._connect() as conn:
                cursor = conn.cursor()
                cursor.execute("""
                    INSERT INTO app_logs
                    (timestamp, level, source, message, details, request_path, account_id)
                    VALUES (?, ?, ?, ?, ?, ?, ?)
                """, (
                    datetime.now().isoformat(), level.upper(), source, message,
                    details, request_path, str(account_id) if account_id is not None else None
                ))
                conn.commit()

        except Exception as e:
            # Fallback to console logging if database fails
            print(f"[{datetime.now().isoformat()}] [{level.upper()}] [{source}] {message}")
            print(f"Logging service error: {e}")

    @staticmethod
    def debug(source, message, details=None):
        LoggingService.log('DEBUG', source, message, details)

    @staticmethod
    def info(source, message, details=None):
        LoggingService.log('INFO', source, message, details)

    @staticmethod
    def warning(source, message, details=None):
        LoggingService.log('WARNING', source, message, details)

    @staticmethod
    def error(source, message, details=None):
        LoggingService.log('ERROR', source, message, details)

    @staticmethod
    def critical(source, message, details=None):
        LoggingService.log('CRITICAL', source, message, details)

    @staticmethod
    def log_user_action(source, action, account_id=None, details=None):
        """Log user actions (login, logout, delete, restore, etc.)"""
        LoggingService.log('INFO', source, f"User action: {action}", details, account_id)

    @staticmethod
    def log_api_call(source, endpoint, method='GET', status_code=200, details=None):
        """Log calls made to the backend API"""
        message = f"API {method} {endpoint} - Status: {status_code}"
        level = 'INFO' if 200 <= status_code < 400 else 'WARNING' if status_code < 500 and status_code != 0 else 'ERROR'
        LoggingService.log(level, source, message, details)

    @staticmethod
    def log_error_with_traceback(source, error, details=None):
        """Log error with full traceback"""
        error_details = {
            'error_type': type(error).__name__,
            'error_message': str(error),
            'traceback': traceback.format_exc()
        }
        if details:
            error_details['additional_details'] = details

        LoggingService.error(source, f"Exception occurred: {type(error).__name__}", error_details)

    @staticmethod
    def log_security_event(message, details=None):
        """Log security-related events (role gate refusals, failed logins)"""
        LoggingService.warning('security', message, details)

    @staticmethod
    def get_recent_logs(limit=100, level=None):
        """Return the most recent log entries as dicts, newest first"""
        try:
            LoggingService._ensure_logs_table()
            with LoggingService._connect() as conn:
                cursor = conn.cursor()
                if level:
                    cursor.execute("""
                        SELECT id, timestamp, level, source, message, details, request_path, account_id
                        FROM app_logs WHERE level = ?
                        ORDER BY id DESC LIMIT ?
                    """, (level.upper(), limit))
                else:
                    cursor.execute("""
                        SELECT id, timestamp, level, source, message, details, request_path, account_id
                        FROM app_logs ORDER BY id DESC LIMIT ?
                    """, (limit,))
                columns = ['id', 'timestamp', 'level', 'source', 'message', 'details',
                           'request_path', 'account_id']
                return [dict(zip(columns, row)) for row in cursor.fetchall()]
        except Exception as e:
            logger.error(f"Failed to read logs: {e}")
            return []

    @staticmethod
    def count_errors_since(hours=1):
        """Count ERROR/CRITICAL entries written in the last `hours` hours"""
        try:
            cutoff = (datetime.now() - timedelta(hours=hours)).isoformat()
            LoggingService._ensure_logs_table()
            with LoggingService._connect() as conn:
                cursor = conn.cursor()
                cursor.execute("""
                    SELECT COUNT(*) FROM app_logs
                    WHERE level IN ('ERROR', 'CRITICAL')
                    AND timestamp > ?
                """, (cutoff,))
                return cursor.fetchone()[0]
        except Exception as e:
            logger.debug(f"Could not count recent errors: {e}")
            return 0

    @staticmethod
    def cleanup_old_logs(days_to_keep=30):
        """Clean up old log entries"""
        try:
            cutoff_iso = (datetime.now() - timedelta(days=days_to_keep)).isoformat()

            with LoggingService._connect() as conn:
                cursor = conn.cursor()
                cursor.execute("DELETE FROM app_logs WHERE timestamp < ?", (cutoff_iso,))
                deleted_count = cursor.rowcount
                conn.commit()

            LoggingService.info('system', f"Cleaned up {deleted_count} old log entries")
            return deleted_count

        except Exception as e:
            LoggingService.error('system', f"Failed to cleanup old logs: {e}")
            return 0

