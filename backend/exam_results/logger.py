"""
Logging module for the exam results proxy.
Logs incoming requests and exam result lookups as JSON lines.
"""

import json
from datetime import datetime, timezone
from pathlib import Path

# Log file names (created inside the configured logs directory)
REQUESTS_LOG = 'requests.log'
LOOKUPS_LOG = 'lookups.log'
ACTIONS_LOG = 'actions.log'  # Combined log of requests and lookups


def _get_timestamp():
    """Get current UTC timestamp in ISO format."""
    return datetime.now(timezone.utc).isoformat()


def _write_log(logs_dir, file_name, log_entry):
    """
    Append a log entry to a file.

    Args:
        logs_dir: directory holding the log files (created if missing)
        file_name: log file name inside logs_dir
        log_entry: dict with log data
    """
    log_file = Path(logs_dir) / file_name
    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        with open(log_file, 'a', encoding='utf-8') as f:
            f.write(json.dumps(log_entry, ensure_ascii=False) + '\n')
    except OSError as e:
        print(f"Error writing to log file {log_file}: {e}")


def log_request(logs_dir, method, path, origin=None):
    """
    Log an incoming HTTP request.

    Args:
        logs_dir: directory holding the log files
        method: str, HTTP method
        path: str, request path including query string
        origin: str, optional Origin header
    """
    log_entry = {
        'timestamp': _get_timestamp(),
        'action': 'request',
        'method': method,
        'path': path,
        'origin': origin or 'Unknown Origin',
    }
    print(f"[{log_entry['timestamp']}] {method} {path} from {log_entry['origin']}")

    _write_log(logs_dir, REQUESTS_LOG, log_entry)
    _write_log(logs_dir, ACTIONS_LOG, log_entry)


def log_lookup(logs_dir, roll_number, outcome, student_name=None, **kwargs):
    """
    Log the outcome of an exam result lookup.

    Args:
        logs_dir: directory holding the log files
        roll_number: str, the requested roll number
        outcome: str, 'found', 'not_found', 'no_data', 'upstream_error' or 'error'
        student_name: str, optional matched student's name
        **kwargs: Additional data to log (error, result, percentage, etc.)
    """
    log_entry = {
        'timestamp': _get_timestamp(),
        'action': 'lookup',
        'roll_number': roll_number,
        'outcome': outcome,
        'student_name': student_name,
        **kwargs
    }

    _write_log(logs_dir, LOOKUPS_LOG, log_entry)
    _write_log(logs_dir, ACTIONS_LOG, log_entry)
