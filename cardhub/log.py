import logging
import logging.config
from os import environ

from yaml import safe_load

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def configure_logging() -> None:
    """Configure logging from CARDHUB_LOG_* variables or a YAML dictConfig file."""
    config_path = environ.get("CARDHUB_LOG_CONFIG")
    if config_path is not None:
        with open(config_path, "r") as f:
            logging.config.dictConfig(safe_load(f.read()))
        return

    level = environ.get("CARDHUB_LOG_LEVEL", "INFO").upper()
    if level not in LOG_LEVELS:
        raise ValueError(f"Invalid log level: {level}")
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    log_file = environ.get("CARDHUB_LOG_FILE")
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    logging.basicConfig(
        level=level,
        format=environ.get(
            "CARDHUB_LOG_FORMAT",
            "%(asctime)s   %(name)-40s %(levelname)-8s %(message)s",
        ),
        handlers=handlers,
    )
    # SQL echo only when explicitly asked for
    if environ.get("CARDHUB_LOG_SQL", "").lower() in ("1", "true", "yes"):
        logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO)
