import logging
import sys

VERBOSE_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
COMPACT_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"

LEVELS = {
    "local": logging.DEBUG,
    "dev": logging.INFO,
    "prod": logging.WARNING,
}


def setup_logging(env: str) -> None:
    """Configure the root logger for the given deployment environment.

    Unknown environment names fall back to INFO.
    """
    level = LEVELS.get(env, logging.INFO)
    fmt = COMPACT_FORMAT if env == "prod" else VERBOSE_FORMAT
    logging.basicConfig(level=level, format=fmt, stream=sys.stdout, force=True)
    # SQL echo only when debugging locally
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if env == "local" else logging.WARNING
    )
