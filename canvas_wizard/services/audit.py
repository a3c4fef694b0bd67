"""
Audit log for state-changing wizard actions.

One "timestamp | user | action | details" line per event. Keys and tokens are
never written here.
"""
import logging
import os
from datetime import datetime

from canvas_wizard.config import config

logger = logging.getLogger(__name__)


def audit_log(action: str, details: str = "", user: str = "instructor"):
    """Append an entry to the audit log."""
    try:
        path = config.audit_log_file
        os.makedirs(os.path.dirname(path) or '.', exist_ok=True)
        timestamp = datetime.now().isoformat()
        with open(path, 'a', encoding='utf-8') as f:
            f.write(f"{timestamp} | {user} | {action} | {details}\n")
    except OSError as e:
        logger.warning("Audit log error: %s", e)


def get_audit_logs(limit: int = 100):
    """Retrieve recent audit log entries, newest first."""
    path = config.audit_log_file
    if not os.path.exists(path):
        return []

    try:
        with open(path, 'r', encoding='utf-8') as f:
            lines = f.readlines()
    except OSError as e:
        logger.warning("Error reading audit log: %s", e)
        return []

    logs = []
    for line in (lines[-limit:] if limit > 0 else []):
        parts = line.rstrip('\n').split(' | ', 3)
        if len(parts) == 4:
            logs.append({
                'timestamp': parts[0],
                'user': parts[1],
                'action': parts[2],
                'details': parts[3],
            })
    return logs[::-1]
