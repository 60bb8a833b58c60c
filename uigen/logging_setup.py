"""Process-wide logging setup shared by the CLI and the API server."""

import logging

from uigen.config import config


def configure_logging(level: str = None) -> None:
    logging.basicConfig(
        level=(level or config.log_level).upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
