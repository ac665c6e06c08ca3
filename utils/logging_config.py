"""Centralized logging configuration for the gatekeeper."""
import logging
import logging.handlers
import os
import time


FORMAT = "%(asctime)sZ | %(levelname)s | %(name)s | %(message)s"


def setup_logging(level: str = "INFO", log_file: str = None) -> None:
    """Configure the root, security and werkzeug loggers."""
    log_level = getattr(logging, str(level).upper(), logging.INFO)

    formatter = logging.Formatter(FORMAT, datefmt="%Y-%m-%dT%H:%M:%S")
    formatter.converter = time.gmtime

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(formatter)
    handlers = [stream_handler]

    if log_file:
        directory = os.path.dirname(log_file)
        if directory:
            os.makedirs(directory, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=10 * 1024 * 1024,
            backupCount=5,
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers = handlers

    # Security events share the root handlers; separate name for filtering
    logging.getLogger("gatekeeper.security").setLevel(log_level)
    logging.getLogger("werkzeug").setLevel(log_level)


__all__ = ["setup_logging"]
