import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Any, Dict, Optional

import structlog


def setup_logging(
    log_level: str = "INFO", log_to_file: bool = True, logs_dir: Optional[Path] = None
) -> None:
    """Set up logging configuration for the application.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_to_file: Whether to log to files in addition to console
        logs_dir: Directory for log files (default: ./logs)
    """
    logs_dir = logs_dir or Path("logs")
    if log_to_file:
        logs_dir.mkdir(parents=True, exist_ok=True)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.set_exc_info,
            # JSON formatting for file logs
            (
                structlog.processors.JSONRenderer()
                if log_to_file
                else structlog.dev.ConsoleRenderer()
            ),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    level = getattr(logging, log_level.upper())

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(
        logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()
    root_logger.addHandler(console_handler)

    if log_to_file:
        app_handler = logging.handlers.RotatingFileHandler(
            logs_dir / "app.log", maxBytes=10 * 1024 * 1024, backupCount=5  # 10MB
        )
        app_handler.setLevel(logging.INFO)
        app_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s"
            )
        )
        root_logger.addHandler(app_handler)

        # Review activity gets its own file for study analytics
        review_handler = logging.handlers.RotatingFileHandler(
            logs_dir / "reviews.log", maxBytes=10 * 1024 * 1024, backupCount=10
        )
        review_handler.setLevel(logging.INFO)
        review_handler.setFormatter(logging.Formatter("%(asctime)s - %(message)s"))
        review_logger = logging.getLogger("srs.reviews")
        review_logger.addHandler(review_handler)
        review_logger.propagate = True

        error_handler = logging.handlers.RotatingFileHandler(
            logs_dir / "errors.log", maxBytes=5 * 1024 * 1024, backupCount=10  # 5MB
        )
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s"
            )
        )
        root_logger.addHandler(error_handler)


def get_review_logger(name: str = "srs.reviews") -> structlog.BoundLogger:
    """Get a structured logger for review activity."""
    return structlog.get_logger(name)


def log_review_recorded(
    session_id: str,
    card_id: str,
    rating: int,
    details: Dict[str, Any],
    logger: structlog.BoundLogger = None,
) -> None:
    """Log one applied review with its scheduling outcome.

    Args:
        session_id: Session the review was submitted against
        card_id: Reviewed card
        rating: Rating 1-5
        details: Scheduling outcome (interval, ease, status, ...)
        logger: Logger to use (creates one if not provided)
    """
    if logger is None:
        logger = get_review_logger()

    logger.info(
        "Review recorded",
        session_id=session_id,
        card_id=card_id,
        rating=rating,
        **details,
    )
