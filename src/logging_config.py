import logging
import logging.handlers
from pathlib import Path
from typing import Optional

DEFAULT_LOG_DIR = Path(__file__).parent.parent / "logs"
LOG_FILE_NAME = "stat_engine.log"


def setup_logging(log_level: str = "INFO", log_dir: Optional[Path] = None) -> None:
    """Configure root logging for the stat engine tools.

    Library modules only create loggers; entry points call this once.
    """
    root_logger = logging.getLogger()
    if root_logger.handlers:
        return  # Already configured

    log_dir = log_dir or DEFAULT_LOG_DIR
    log_dir.mkdir(parents=True, exist_ok=True)
    level = getattr(logging, log_level.upper(), logging.INFO)

    root_logger.setLevel(logging.DEBUG)

    # File handler with rotation (5MB max, keep 3 backups)
    file_handler = logging.handlers.RotatingFileHandler(
        log_dir / LOG_FILE_NAME, maxBytes=5 * 1024 * 1024, backupCount=3
    )
    file_handler.setLevel(logging.DEBUG)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    file_handler.setFormatter(formatter)
    console_handler.setFormatter(formatter)

    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)

    logging.getLogger(__name__).info("Logging initialized (level=%s)", log_level)
