"""Structured logging of load and match calls (timestamp, mode, timing)."""

import logging
import logging.handlers
import queue
import sys
import threading
import time
from pathlib import Path
from typing import Any, Union

from .config import DEFAULT_LOG_FILE

_LOG_LEVEL = logging.INFO

_log_queue: Union["queue.Queue[Any]", None] = None
_listener_thread: Union[threading.Thread, None] = None
_listener_stop_event: Union[threading.Event, None] = None


def setup_logging_queue() -> None:
    """Setup the global queue for logging.

    This should be called ONCE before any matching thread starts.
    """
    global _log_queue
    if _log_queue is None:
        _log_queue = queue.Queue(-1)


def _build_file_handler(log_file_path: Path) -> logging.Handler:
    """Create the rotating file handler used by the listener thread."""
    log_file_path.parent.mkdir(parents=True, exist_ok=True)
    file_handler = logging.handlers.RotatingFileHandler(
        log_file_path,
        maxBytes=10 * 1024 * 1024,
        backupCount=5,
        encoding="utf-8",
    )
    formatter = logging.Formatter(
        "level=%(levelname)s | time=%(asctime)s | process=%(process)d | "
        "thread=%(thread)d | module=%(module)s | funcName=%(funcName)s | "
        "lineno=%(lineno)d | message=%(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    file_handler.setFormatter(formatter)
    return file_handler


def _listener_thread_target(
    log_queue: "queue.Queue[Any]",
    stop_event: threading.Event,
    log_file_path: Path,
) -> None:
    """Target function for the logging listener thread.

    This function continuously pulls log records from the queue and
    writes them to the log file.

    Args:
        log_queue (queue.Queue): The queue to pull log records from.
        stop_event (threading.Event): The event to stop the thread.
        log_file_path (Path): The file the records are written to.

    """
    file_handler = _build_file_handler(log_file_path)

    print(
        f"[LOGGER] Listener thread started, writing to {log_file_path}",
        file=sys.stderr,
    )

    try:
        while not stop_event.is_set() or not log_queue.empty():
            try:
                record = log_queue.get(timeout=0.1)
                if record is None:
                    break
                file_handler.handle(record)
            except queue.Empty:
                time.sleep(0.05)
            except Exception as e:
                print(
                    f"[LOGGER ERROR] Error in logging listener: {e}",
                    file=sys.stderr,
                )
    finally:
        file_handler.close()
    print("[LOGGER] Listener thread stopped.", file=sys.stderr)


def start_logging_listener(log_file_path: Path = DEFAULT_LOG_FILE) -> None:
    """Start the dedicated listener thread for processing log messages from
    the queue.

    This should be called ONCE after setup_logging_queue().

    Args:
        log_file_path (Path): The file the records are written to.

    """
    global _listener_thread
    global _listener_stop_event
    if _log_queue is None:
        raise RuntimeError(
            "Log queue not initialized. Call setup_logging_queue() first.",
        )
    if _listener_thread is None:
        _listener_stop_event = threading.Event()
        _listener_thread = threading.Thread(
            target=_listener_thread_target,
            args=(_log_queue, _listener_stop_event, log_file_path),
            daemon=True,
        )
        _listener_thread.start()


def stop_logging_listener() -> None:
    """Signal the logging listener thread to stop and wait for it to finish.

    This should be called ONCE during shutdown.
    """
    global _listener_stop_event, _listener_thread, _log_queue
    if _listener_stop_event:
        if _log_queue is not None:
            _log_queue.put_nowait(None)
        _listener_stop_event.set()

        if _listener_thread and _listener_thread.is_alive():
            _listener_thread.join(timeout=5)
            if _listener_thread.is_alive():
                print(
                    "[LOGGER WARNING] Logging listener thread did not stop "
                    "gracefully.",
                    file=sys.stderr,
                )
        _listener_stop_event = None
        _listener_thread = None
        _log_queue = None


def setup_queue_logging(level: int = _LOG_LEVEL) -> None:
    """Route every record of the root logger through the logging queue.

    This function replaces standard handlers with a QueueHandler
    that sends messages to the listener thread.

    Args:
        level (int): The root logger level.

    """
    if _log_queue is None:
        raise RuntimeError(
            "Log queue not initialized. Call setup_logging_queue() first.",
        )

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    queue_handler = logging.handlers.QueueHandler(_log_queue)
    root_logger.addHandler(queue_handler)


def teardown_queue_logging() -> None:
    """Detach the queue handlers installed by setup_queue_logging()."""
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        if isinstance(handler, logging.handlers.QueueHandler):
            root_logger.removeHandler(handler)


def log(
    time_stamp: str,
    source: str,
    mode: str,
    input_size: int,
    match_count: int,
    execution_time_ms: float,
) -> None:
    """Log the details of a match call using the configured
    logging system.

    Args:
        time_stamp (str): The timestamp of the match call.
        source (str): Where the input came from (a file name or "stdin").
        mode (str): The matching mode used.
        input_size (int): Characters or tokens in the input.
        match_count (int): The number of matches found.
        execution_time_ms (float): The execution time in milliseconds.

    """
    # Use standard logging, the handlers will direct it appropriately
    logging.info(
        "Timestamp: %s, Source: %s, Mode: %s, Input size: %d, "
        "Matches: %d, Execution Time: %.2f ms",
        time_stamp,
        source,
        mode,
        input_size,
        match_count,
        execution_time_ms,
    )
