import logging
from logging import Logger
from pathlib import Path

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(settings) -> None:
    """Initialize console + file logging for the engine service."""
    log_level = str(getattr(settings, "LOG_LEVEL", "INFO")).upper()
    log_path = getattr(settings, "LOG_PATH", None)

    root = logging.getLogger()
    if root.handlers:
        # Already configured (uvicorn, pytest)
        return

    root.setLevel(log_level)
    formatter = logging.Formatter(LOG_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    root.addHandler(console_handler)

    if not log_path:
        return
    try:
        path = Path(log_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(path, encoding="utf-8")
    except OSError:
        # Read-only filesystems (serverless) get console logging only.
        root.warning("File logging disabled, cannot open %s", log_path)
        return
    file_handler.setLevel(log_level)
    file_handler.setFormatter(formatter)
    root.addHandler(file_handler)


def get_logger(name: str) -> Logger:
    """Get a named logger."""
    return logging.getLogger(name)
