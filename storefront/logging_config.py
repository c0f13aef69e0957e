"""Logging setup for the storefront.

Everything logs under the ``storefront`` logger. Records go to the console
(colored on a terminal) and to ``logs/storefront_YYYYMMDD.jsonl``, one JSON
object per line, so catalog and image lookup failures can be grepped later.
"""

import json
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

if __package__ is None or __package__ == "":
    sys.path.insert(0, str(Path(__file__).parent))
    from config import LOG_DIR
else:
    from .config import LOG_DIR

__all__ = [
    "setup_logging",
    "get_logger",
    "log_event",
]

ROOT_LOGGER_NAME = "storefront"
CONSOLE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def _record_to_entry(record: logging.LogRecord) -> Dict[str, Any]:
    entry: Dict[str, Any] = {
        "timestamp": datetime.fromtimestamp(record.created).isoformat(),
        "level": record.levelname,
        "logger": record.name,
        "message": record.getMessage(),
    }
    event_type = getattr(record, "event_type", None)
    if event_type:
        entry["event_type"] = event_type
    entry.update(getattr(record, "event_data", {}))
    if record.exc_info:
        entry["exception"] = logging.Formatter().formatException(record.exc_info)
    return entry


class JSONLFileHandler(logging.Handler):
    """Append each record as a JSON line to a file named after the day."""

    def __init__(self, log_dir: Path):
        super().__init__()
        self.log_dir = Path(log_dir)
        self.log_dir.mkdir(parents=True, exist_ok=True)

    def path_for(self, when: datetime) -> Path:
        return self.log_dir / f"{ROOT_LOGGER_NAME}_{when:%Y%m%d}.jsonl"

    def emit(self, record: logging.LogRecord) -> None:
        try:
            line = json.dumps(_record_to_entry(record), ensure_ascii=False, default=str)
            with open(self.path_for(datetime.now()), "a", encoding="utf-8") as f:
                f.write(line + "\n")
        except Exception:
            self.handleError(record)


class ColorFormatter(logging.Formatter):
    """Wrap the whole line in the level's ANSI color."""

    COLORS = {
        logging.DEBUG: "\033[36m",
        logging.INFO: "\033[32m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[35m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelno)
        text = super().format(record)
        return f"{color}{text}{self.RESET}" if color else text


def setup_logging(
    level: int = logging.INFO,
    log_dir: Optional[Path] = None,
    console: bool = True,
) -> logging.Logger:
    """Configure the storefront logger; safe to call again (handlers are replaced).

    The JSONL file always receives DEBUG and up; the console follows ``level``.
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(level)
    logger.handlers.clear()

    if console:
        stream = logging.StreamHandler(sys.stdout)
        stream.setLevel(level)
        formatter_cls = ColorFormatter if sys.stdout.isatty() else logging.Formatter
        stream.setFormatter(formatter_cls(CONSOLE_FORMAT, datefmt="%H:%M:%S"))
        logger.addHandler(stream)

    file_handler = JSONLFileHandler(log_dir or LOG_DIR)
    file_handler.setLevel(logging.DEBUG)
    logger.addHandler(file_handler)
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """``storefront.<name>``, or the package logger itself when name is None."""
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}" if name else ROOT_LOGGER_NAME)


def log_event(event_type: str, data: Dict[str, Any], level: int = logging.INFO) -> None:
    """Log a structured event.

    ``data["message"]`` becomes the log message; the remaining keys are
    written as top-level fields of the JSONL entry.
    """
    fields = {k: v for k, v in data.items() if k != "message"}
    get_logger().log(
        level,
        data.get("message", event_type),
        extra={"event_type": event_type, "event_data": fields},
    )
