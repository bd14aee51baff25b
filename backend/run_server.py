"""Development launcher: `python run_server.py` from the backend directory.

Code reload follows DEBUG, which is on in the development environment.
"""
import logging
import signal
import sys

import uvicorn

from catchbook.core.config import settings
from catchbook.main import configure_logging

logger = logging.getLogger("catchbook.server")


def handle_signal(sig, frame):
    logger.info(f"Received signal {sig}, shutting down")
    sys.exit(0)


if __name__ == "__main__":
    configure_logging()
    signal.signal(signal.SIGINT, handle_signal)
    signal.signal(signal.SIGTERM, handle_signal)

    logger.info(f"Starting Catchbook backend ({settings.ENVIRONMENT}, reload={settings.DEBUG})")
    uvicorn.run(
        "catchbook.main:app",
        host="127.0.0.1",
        port=8000,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower(),
    )
