from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Root logging setup; called once from the application factory."""
    logging.basicConfig(level=(level or "INFO").upper(), format=LOG_FORMAT)
