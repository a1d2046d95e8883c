"""Postpad standalone server.

Run with:
  python -m postpad

Listens on HOST/PORT (default 0.0.0.0:3000). Exits with status 1 when the
configuration is incomplete.
"""

import logging
import os
import sys

import uvicorn

from postpad.config import load_settings
from postpad.exceptions import ConfigurationError

logger = logging.getLogger("postpad")


def main() -> None:
    try:
        settings = load_settings()
    except ConfigurationError as e:
        logging.basicConfig(level=logging.ERROR, format="%(levelname)s %(name)s: %(message)s")
        logger.critical(e.message)
        sys.exit(1)

    reload = os.getenv("POSTPAD_RELOAD", "false").lower() in {"1", "true", "yes", "y"}
    uvicorn.run(
        "postpad.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        reload=reload,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
