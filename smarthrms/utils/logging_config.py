"""
Logging setup for the SmartHRMS API.

`configure_for_environment()` is called once at startup (and by the test
suite) and picks a preset from ENVIRONMENT:

    development  DEBUG, console + log files
    production   LOG_LEVEL (default INFO), console + log files
    testing      WARNING, console only

Log files go to LOG_DIR (default ``logs``): ``smarthrms_<date>.log`` for
everything and ``smarthrms_errors_<date>.log`` for ERROR and above, both
rotated at 10MB.
"""
import functools
import inspect
import logging
import logging.config
import os
import time
from datetime import datetime
from pathlib import Path
from typing import Any, Dict

LOG_FORMATS = {
    "simple": "%(levelname)s - %(name)s - %(message)s",
    "detailed": "%(asctime)s | %(levelname)-8s | %(name)-30s | %(funcName)-20s:%(lineno)-4d | %(message)s",
}

# environment -> (level, write log files, console format)
PRESETS = {
    "development": ("DEBUG", True, "detailed"),
    "production": (None, True, "detailed"),
    "testing": ("WARNING", False, "simple"),
}

MAX_LOG_BYTES = 10 * 1024 * 1024


def _rotating_file(path: Path, level: str) -> Dict[str, Any]:
    return {
        "class": "logging.handlers.RotatingFileHandler",
        "level": level,
        "formatter": "detailed",
        "filename": str(path),
        "maxBytes": MAX_LOG_BYTES,
        "backupCount": 5,
        "encoding": "utf8",
    }


def setup_logging(level: str = "INFO", enable_file: bool = True, console_format: str = "detailed") -> None:
    """Configure the root and uvicorn loggers through dictConfig"""
    handlers: Dict[str, Any] = {
        "console": {
            "class": "logging.StreamHandler",
            "level": level,
            "formatter": console_format,
            "stream": "ext://sys.stdout",
        }
    }
    root_handlers = ["console"]

    if enable_file:
        log_dir = Path(os.getenv("LOG_DIR", "logs"))
        log_dir.mkdir(parents=True, exist_ok=True)
        stamp = datetime.now().strftime("%Y%m%d")
        handlers["file"] = _rotating_file(log_dir / f"smarthrms_{stamp}.log", level)
        handlers["error_file"] = _rotating_file(log_dir / f"smarthrms_errors_{stamp}.log", "ERROR")
        root_handlers += ["file", "error_file"]

    uvicorn_handlers = [h for h in root_handlers if h != "error_file"]
    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            name: {"format": fmt, "datefmt": "%Y-%m-%d %H:%M:%S"} for name, fmt in LOG_FORMATS.items()
        },
        "handlers": handlers,
        "loggers": {
            "": {"level": level, "handlers": root_handlers, "propagate": False},
            "uvicorn": {"level": "INFO", "handlers": uvicorn_handlers, "propagate": False},
            "uvicorn.access": {"level": "INFO", "handlers": ["console"], "propagate": False},
        },
    })

    logging.getLogger("smarthrms.logging").info(
        f"Logging configured - Level: {level}, Files: {enable_file}"
    )


def get_logger(name: str) -> logging.Logger:
    """Logger namespaced under ``smarthrms``"""
    if name.startswith("smarthrms"):
        return logging.getLogger(name)
    return logging.getLogger(f"smarthrms.{name}")


def configure_for_environment() -> None:
    environment = os.getenv("ENVIRONMENT", "development").lower()
    configured_level = os.getenv("LOG_LEVEL", "INFO").upper()

    level, enable_file, console_format = PRESETS.get(environment, (None, True, "detailed"))
    setup_logging(level=level or configured_level, enable_file=enable_file, console_format=console_format)


def log_function_call(func):
    """Log entry, exit and failures of a function at DEBUG (errors at ERROR)"""
    def _log(logger, started, outcome, error=None):
        elapsed = time.time() - started
        if error is None:
            logger.debug(f"{outcome} {func.__name__} in {elapsed:.3f}s")
        else:
            logger.error(f"Error in {func.__name__} after {elapsed:.3f}s: {error}")

    if inspect.iscoroutinefunction(func):
        @functools.wraps(func)
        async def async_wrapper(*args, **kwargs):
            logger = get_logger(func.__module__)
            started = time.time()
            logger.debug(f"Entering {func.__name__}")
            try:
                result = await func(*args, **kwargs)
            except Exception as e:
                _log(logger, started, "Failed", e)
                raise
            _log(logger, started, "Completed")
            return result
        return async_wrapper

    @functools.wraps(func)
    def sync_wrapper(*args, **kwargs):
        logger = get_logger(func.__module__)
        started = time.time()
        logger.debug(f"Entering {func.__name__}")
        try:
            result = func(*args, **kwargs)
        except Exception as e:
            _log(logger, started, "Failed", e)
            raise
        _log(logger, started, "Completed")
        return result
    return sync_wrapper


class PerformanceMonitor:
    """Times a block and logs it; WARNING when it exceeds threshold_ms"""

    def __init__(self, operation_name: str, logger: logging.Logger = None, threshold_ms: float = 1000):
        self.operation_name = operation_name
        self.logger = logger or get_logger("performance")
        self.threshold_ms = threshold_ms
        self.start_time = None

    def __enter__(self):
        self.start_time = time.time()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        elapsed_ms = (time.time() - self.start_time) * 1000

        if exc_type is not None:
            self.logger.error(f"{self.operation_name} failed after {elapsed_ms:.2f}ms: {exc_val}")
        elif elapsed_ms > self.threshold_ms:
            self.logger.warning(f"{self.operation_name} took {elapsed_ms:.2f}ms (threshold {self.threshold_ms}ms)")
        else:
            self.logger.debug(f"{self.operation_name} completed in {elapsed_ms:.2f}ms")
        return False
