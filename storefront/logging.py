import logging
import logging.config
import os

from .core.config import settings


def configure_logging(config_file: str = None) -> logging.Logger:
    """Load handlers from the INI logging config, or fall back to basicConfig."""
    config_file = config_file or settings.LOG_CONFIG_FILE

    if os.path.exists(config_file):
        # The file handler writes under logs/
        os.makedirs("logs", exist_ok=True)
        logging.config.fileConfig(config_file, disable_existing_loggers=False)
    else:
        logging.basicConfig(
            level=logging.INFO,
            format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        )
        logging.getLogger(__name__).warning(f"Logging config {config_file} not found, using basicConfig")

    return logging.getLogger()
