import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from dutydesk.core.config import settings


LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def configure_logging(log_dir: Path | None = None, level: str | None = None) -> None:
    """Attach console and rotating-file handlers to the root logger once per process."""
    root_logger = logging.getLogger()
    if root_logger.handlers:
        return

    log_path = Path(log_dir or settings.data_dir) / "dutydesk.log"
    log_path.parent.mkdir(parents=True, exist_ok=True)

    root_logger.setLevel((level or settings.log_level).upper())
    formatter = logging.Formatter(LOG_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)

    file_handler = RotatingFileHandler(
        log_path,
        maxBytes=1_000_000,
        backupCount=3,
        encoding="utf-8",
    )
    file_handler.setFormatter(formatter)

    root_logger.addHandler(console_handler)
    root_logger.addHandler(file_handler)

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger(__name__).info("logging configured at %s -> %s", root_logger.level, log_path)
