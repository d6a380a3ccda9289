import logging

from wanderplan.core.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str | None = None) -> None:
    logging.basicConfig(level=(level or settings.log_level).upper(), format=LOG_FORMAT)
    # pymongo's heartbeat logs are noise at INFO
    logging.getLogger("pymongo").setLevel(logging.WARNING)
