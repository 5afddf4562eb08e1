"""
Application logging setup.

Call setup_logging() once at application start (the FastAPI lifespan does
this). Modules log through logging.getLogger(__name__).
"""
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

# Marker attribute to avoid adding duplicate handlers
_APP_LOG_HANDLER_ATTR = "_odovision_log_handler"


def setup_logging(
    log_level: Union[int, str] = logging.INFO,
    log_dir: Optional[str] = None,
    to_console: bool = True,
) -> None:
    """
    Configure root logging for the service.

    Idempotent: safe to call multiple times; only configures once.

    Args:
        log_level: Logging level name or number (default INFO).
        log_dir: If set, also write to log_dir/odovision_YYYYMMDD.log.
        to_console: If True, also emit to stderr (default True).
    """
    root = logging.getLogger()
    for h in root.handlers:
        if getattr(h, _APP_LOG_HANDLER_ATTR, False):
            return

    if isinstance(log_level, str):
        log_level = logging.getLevelName(log_level.upper())
        if not isinstance(log_level, int):
            log_level = logging.INFO

    formatter = logging.Formatter(
        "[%(asctime)s] %(name)s %(levelname)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    handlers = []
    if log_dir:
        logs_dir = Path(log_dir).resolve()
        logs_dir.mkdir(parents=True, exist_ok=True)
        date_str = datetime.now().strftime("%Y%m%d")
        handlers.append(
            logging.FileHandler(logs_dir / f"odovision_{date_str}.log", encoding="utf-8")
        )
    if to_console:
        handlers.append(logging.StreamHandler(sys.stderr))

    for handler in handlers:
        handler.setLevel(log_level)
        handler.setFormatter(formatter)
        setattr(handler, _APP_LOG_HANDLER_ATTR, True)
        root.addHandler(handler)

    root.setLevel(log_level)
