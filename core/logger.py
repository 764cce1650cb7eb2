import logging
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class LoggerFactory:
    """Builds named loggers that write to the console and, optionally, a log file."""

    logs_dir: Path = Path("logs")

    @classmethod
    def get_logger(cls, name: str, log_file: Optional[str] = None, level: int = logging.INFO) -> logging.Logger:
        logger = logging.getLogger(name)
        logger.setLevel(level)

        if logger.handlers:
            return logger

        formatter = logging.Formatter(LOG_FORMAT)

        stream_handler = logging.StreamHandler()
        stream_handler.setFormatter(formatter)
        logger.addHandler(stream_handler)

        if log_file:
            cls.logs_dir.mkdir(exist_ok=True)
            file_handler = logging.FileHandler(cls.logs_dir / log_file)
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)

        return logger
