"""
Serverless entrypoint (Vercel Python runtime).

Exports the ASGI `app`. The platform owns the listening socket, so PORT/HOST
are not used here; DATABASE_URL and JWT_SECRET are still required and a
missing value fails the cold start with a ConfigurationError.
"""
import logging

from postpad.main import create_app, setup_logging
from postpad.config import load_settings

settings = load_settings()
setup_logging(settings.log_level)
logging.getLogger(__name__).info("Serverless cold start")

app = create_app(settings)
