import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

def setup_logging(log_dir: Optional[str] = "logs", level: int = logging.INFO):
    """Configure logging for the application"""

    handlers = [logging.StreamHandler(sys.stdout)]

    # File handler with rotation, skipped when no log directory is configured
    if log_dir:
        logs_dir = Path(log_dir)
        logs_dir.mkdir(exist_ok=True)
        handlers.append(
            RotatingFileHandler(
                logs_dir / "app.log",
                maxBytes=10*1024*1024,  # 10MB
                backupCount=5
            )
        )

    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=handlers
    )

    # Set specific log levels for different modules
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("uvicorn").setLevel(logging.INFO)
    logging.getLogger("fastapi").setLevel(logging.INFO)

    # Application loggers
    logging.getLogger("app.api").setLevel(logging.INFO)
    logging.getLogger("app.services").setLevel(logging.INFO)
