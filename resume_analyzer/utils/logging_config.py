"""
Centralized Logging Configuration for the Resume Analyzer API
"""
import logging
import logging.config
import os
import time
from datetime import datetime
from pathlib import Path
from typing import Dict, Any

LOGGER_NAMESPACE = "resume_analyzer"

FORMATS = {
    "simple": "%(levelname)s - %(name)s - %(message)s",
    "detailed": "%(asctime)s | %(levelname)-8s | %(name)-40s | %(funcName)-20s:%(lineno)-4d | %(message)s",
}

# level, file logging, console format
ENVIRONMENT_PROFILES = {
    "production": (None, True, "detailed"),
    "development": ("DEBUG", True, "detailed"),
    "testing": ("WARNING", False, "simple"),
}

# Third-party loggers that drown out request logs below these levels
QUIET_LOGGERS = {
    "pdfminer": "ERROR",
    "PIL": "WARNING",
    "httpx": "WARNING",
    "urllib3": "WARNING",
}


def _rotating_file(path: Path, level: str) -> Dict[str, Any]:
    return {
        "class": "logging.handlers.RotatingFileHandler",
        "level": level,
        "formatter": "detailed",
        "filename": str(path),
        "maxBytes": 10485760,  # 10MB
        "backupCount": 5,
        "encoding": "utf8",
    }


def setup_logging(
    level: str = "INFO",
    enable_file: bool = True,
    format_style: str = "detailed"
) -> None:
    """
    Setup centralized logging configuration

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        enable_file: Also write rotating logs under LOG_DIR
        format_style: Console format ('simple' or 'detailed')
    """
    stamp = datetime.now().strftime('%Y%m%d')
    log_dir = Path(os.getenv("LOG_DIR", "logs"))

    handlers: Dict[str, Any] = {
        "console": {
            "class": "logging.StreamHandler",
            "level": level,
            "formatter": format_style if format_style in FORMATS else "detailed",
            "stream": "ext://sys.stdout",
        }
    }
    if enable_file:
        log_dir.mkdir(parents=True, exist_ok=True)
        handlers["file"] = _rotating_file(log_dir / f"resume_analyzer_{stamp}.log", level)
        handlers["error_file"] = _rotating_file(log_dir / f"resume_analyzer_errors_{stamp}.log", "ERROR")

    loggers: Dict[str, Any] = {
        "": {"level": level, "handlers": list(handlers), "propagate": False},
        "uvicorn": {"level": "INFO", "handlers": list(handlers), "propagate": False},
        "uvicorn.access": {"level": "INFO", "handlers": ["console"], "propagate": False},
    }
    for name, quiet_level in QUIET_LOGGERS.items():
        loggers[name] = {"level": quiet_level}

    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {name: {"format": fmt, "datefmt": "%Y-%m-%d %H:%M:%S"} for name, fmt in FORMATS.items()},
        "handlers": handlers,
        "loggers": loggers,
    })

    get_logger("logging").info(
        f"Logging configured - Level: {level}, File: {log_dir if enable_file else 'disabled'}"
    )


def get_logger(name: str) -> logging.Logger:
    """Return a logger under the resume_analyzer namespace"""
    if name == LOGGER_NAMESPACE or name.startswith(f"{LOGGER_NAMESPACE}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOGGER_NAMESPACE}.{name}")


def configure_for_environment():
    """Configure logging based on ENVIRONMENT and LOG_LEVEL"""
    environment = os.getenv("ENVIRONMENT", "development").lower()
    log_level = os.getenv("LOG_LEVEL", "INFO").upper()

    level, enable_file, format_style = ENVIRONMENT_PROFILES.get(environment, (None, True, "detailed"))
    setup_logging(level=level or log_level, enable_file=enable_file, format_style=format_style)


class PerformanceMonitor:
    """Context manager that logs how long an extraction, render or upstream call took"""

    def __init__(self, operation_name: str, logger: logging.Logger = None, threshold_ms: float = 1000):
        self.operation_name = operation_name
        self.logger = logger or get_logger("performance")
        self.threshold_ms = threshold_ms
        self.start_time = None
        self.elapsed_ms = None

    def __enter__(self):
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.elapsed_ms = (time.perf_counter() - self.start_time) * 1000

        if exc_type is not None:
            self.logger.error(f"{self.operation_name} failed after {self.elapsed_ms:.2f}ms: {exc_val}")
        elif self.elapsed_ms > self.threshold_ms:
            self.logger.warning(f"{self.operation_name} took {self.elapsed_ms:.2f}ms (threshold {self.threshold_ms}ms)")
        else:
            self.logger.info(f"{self.operation_name} completed in {self.elapsed_ms:.2f}ms")
