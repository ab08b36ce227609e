"""
Provides structured, thread-safe log lines for provisioning and conversion.

Every record is a single line of the form
``<UTC timestamp> | [LEVEL] | <event> | key="value" | ...`` so that the output
of many concurrent conversions stays greppable. Lines go through
``tqdm.write`` to keep active progress bars intact.
"""
import threading
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional

from tqdm import tqdm

_print_lock = threading.Lock()
_worker_id_map = {}
_worker_counter = 0
_worker_lock = threading.Lock()
_separator = " | "

# Captured stderr from ffmpeg can be long; keep log lines readable
MAX_VALUE_LENGTH = 500


class LogLevel(Enum):
    """Log level enumeration."""
    TRACE = 0
    DEBUG = 1
    INFO = 2
    WARN = 3
    ERROR = 4


_current_level = LogLevel.INFO


def set_log_level(level: LogLevel) -> None:
    """Set the current log level."""
    global _current_level
    _current_level = level


def get_log_level() -> LogLevel:
    """Get the current log level."""
    return _current_level


def printable(text: str) -> str:
    """Escape characters that cannot be written as UTF-8 (e.g. undecodable file names)."""
    return text.encode("utf-8", "backslashreplace").decode("utf-8")


def _clip(text: str, limit: Optional[int] = MAX_VALUE_LENGTH) -> str:
    if limit is None or len(text) <= limit:
        return text
    return text[:limit] + "..."


def format_kv(data: Dict[str, Any]) -> str:
    """Format key-value pairs as ``key=value`` fields joined by the separator."""
    parts = []
    for key, value in data.items():
        if isinstance(value, str):
            escaped = printable(_clip(value)).replace("\r", "\\r").replace("\n", "\\n")
            escaped = escaped.replace('"', '\\"')
            parts.append(f'{key}="{escaped}"')
        elif value is None:
            parts.append(f"{key}=null")
        elif isinstance(value, bool):
            parts.append(f"{key}={str(value).lower()}")
        elif isinstance(value, float):
            parts.append(f"{key}={value:.2f}")
        else:
            parts.append(f"{key}={value}")
    return _separator.join(parts)


def _should_log(level: LogLevel) -> bool:
    """Check if a message at the given level should be logged."""
    return level.value >= _current_level.value


def log(event: str, level: LogLevel = LogLevel.INFO, **kwargs) -> None:
    """
    Emit one structured log line.

    Args:
        event: Dotted event name (e.g. 'provision.download', 'convert.failed')
        level: Log level (TRACE, DEBUG, INFO, WARN, ERROR)
        **kwargs: Key-value pairs appended to the line
    """
    if not _should_log(level):
        return

    if "worker" not in kwargs:
        kwargs["worker"] = get_worker_id()

    with _print_lock:
        timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S")
        header = f"{timestamp}{_separator}[{level.name}]{_separator}{printable(event)}"
        kv_str = format_kv(kwargs)
        tqdm.write(f"{header}{_separator}{kv_str}" if kv_str else header)


def safe_print(*args, **kwargs) -> None:
    """Thread-safe print for plain, human-facing messages."""
    args = [printable(a) if isinstance(a, str) else a for a in args]
    with _print_lock:
        print(*args, **kwargs, flush=True)


def get_worker_id() -> str:
    """Get current worker/thread identifier (numeric ID for worker threads)."""
    global _worker_counter
    thread = threading.current_thread()

    if thread is threading.main_thread():
        return "main"

    if thread.ident in _worker_id_map:
        return _worker_id_map[thread.ident]

    with _worker_lock:
        _worker_counter += 1
        worker_id = f"w{_worker_counter}"
        _worker_id_map[thread.ident] = worker_id
        return worker_id
