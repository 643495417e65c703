"""
# utils/logging_utils.py

Module Contract
- Purpose: Logging setup for the assistants app. One root configuration at startup, named loggers per component, and two decorators for timing gateway sends and conversation turns.
- Inputs:
  - configure_logging(level, file_path, file_level, console_level)
  - get_logger(name) → logging.Logger
  - log_and_time(label) → decorator (sync or async functions)
  - log_async_operation → decorator (coroutines)
- Side effects:
  - configure_logging() replaces root handlers; the log file is truncated per run.
"""
import functools
import inspect
import logging
import time
from typing import Callable, Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] [%(name)s] %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(
    level: int = logging.INFO,
    file_path: Optional[str] = "assistants_debug.log",
    file_level: int = logging.DEBUG,
    console_level: Optional[int] = None,
) -> None:
    """Install console and file handlers on the root logger, dropping any existing ones."""
    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(min(level, file_level))
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    console = logging.StreamHandler()
    console.setLevel(level if console_level is None else console_level)
    console.setFormatter(formatter)
    root.addHandler(console)

    if not file_path:
        return
    try:
        file_handler = logging.FileHandler(file_path, mode="w", encoding="utf-8")
    except OSError as e:
        root.warning(f"Could not open log file {file_path}: {e}")
        return
    file_handler.setLevel(file_level)
    file_handler.setFormatter(formatter)
    root.addHandler(file_handler)


def get_logger(name: str = "assistants") -> logging.Logger:
    return logging.getLogger(name)


def log_and_time(label: str = "Function") -> Callable:
    """Log START/END with elapsed seconds at DEBUG around the wrapped call."""
    def decorator(func):
        log = get_logger(func.__module__)

        def _finish(started: float) -> None:
            log.debug(f"[{label}] END ({time.perf_counter() - started:.2f}s)")

        if inspect.iscoroutinefunction(func):
            @functools.wraps(func)
            async def timed_async(*args, **kwargs):
                started = time.perf_counter()
                log.debug(f"[{label}] START")
                try:
                    return await func(*args, **kwargs)
                finally:
                    _finish(started)
            return timed_async

        @functools.wraps(func)
        def timed(*args, **kwargs):
            started = time.perf_counter()
            log.debug(f"[{label}] START")
            try:
                return func(*args, **kwargs)
            finally:
                _finish(started)
        return timed

    return decorator


def log_async_operation(func):
    """Trace a coroutine; exceptions are logged and re-raised."""
    log = get_logger(func.__module__)

    @functools.wraps(func)
    async def traced(*args, **kwargs):
        log.debug(f"[ASYNC START] {func.__qualname__}")
        try:
            result = await func(*args, **kwargs)
        except Exception as e:
            log.error(f"[ASYNC ERROR] {func.__qualname__}: {type(e).__name__}: {e}")
            raise
        log.debug(f"[ASYNC COMPLETE] {func.__qualname__}")
        return result

    return traced
