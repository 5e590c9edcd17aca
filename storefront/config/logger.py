# storefront/config/logger.py

import os
from typing import Optional

from storefront.config.settings import Settings
from storefront.shared.logger import StoreLogger

settings = Settings()

# Ensure the log directory exists
log_dir = os.path.dirname(settings.app.log_file)
if log_dir and not os.path.exists(log_dir):
    os.makedirs(log_dir, exist_ok=True)


def get_logger(name: Optional[str] = None) -> StoreLogger:
    """
    Return the StoreLogger for `name` (defaults to the app name).
    Loggers are cached per name, so repeated calls share handlers.
    """
    return StoreLogger(
        name=name or settings.app.app_name,
        log_file=settings.app.log_file,
        level=settings.app.log_level,
    )


logger: StoreLogger = get_logger()
