from loguru import logger
from pathlib import Path
import sys

from ..config import settings


def setup_logging(log_level: str = "INFO", log_file: str = "logs/repograph.log", sink=sys.stderr):
    """Setup logging configuration.

    The console sink defaults to stderr so that stdout stays free for the
    JSON graph printed by the CLI. An empty ``log_file`` disables file logging.
    """
    # Remove default logger
    logger.remove()

    # Console logger
    logger.add(
        sink,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{extra[component]}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
        level=log_level,
        colorize=True,
    )

    if log_file:
        # Create log directory if it doesn't exist
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        # File logger
        logger.add(
            log_file,
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {extra[component]}:{function}:{line} - {message}",
            level=log_level,
            rotation="10 MB",
            retention="30 days",
            compression="zip",
        )

    return logger.bind(component="repograph")


# Initialize logger
logger.configure(extra={"component": "repograph"})
app_logger = setup_logging(settings.log_level, settings.log_file)
