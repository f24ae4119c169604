import logging
import os


LOG_FORMAT = '%(asctime)s %(levelname)s [%(name)s] %(message)s'
QUIET_LOGGERS = ('urllib3', 'requests', 'asyncio', 'werkzeug')


def configure_logging(default_level: str = "INFO") -> None:
    """Configure logging consistently for Lambda, Flask and CLI execution."""
    log_level = (os.environ.get("LOG_LEVEL") or default_level).upper()
    root = logging.getLogger()
    root.setLevel(getattr(logging, log_level, logging.INFO))

    # Lambda installs its own root handler; only add one when none exists.
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
