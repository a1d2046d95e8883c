"""
Postpad — Flow Error Translation
==================================

What:  Context manager used by the flow services to give store failures the
       flow's user-facing message ("Failed to create post", "Server error", ...).
How:   Application errors other than DatabaseError pass through untouched;
       DatabaseError is re-raised with the flow's message and the original
       context; anything else is logged with a stack trace and wrapped.
"""

import logging
from contextlib import contextmanager
from typing import Iterator

from postpad.exceptions import DatabaseError, PostpadError

logger = logging.getLogger(__name__)


@contextmanager
def store_failures_as(message: str, flow: str) -> Iterator[None]:
    try:
        yield
    except DatabaseError as e:
        raise DatabaseError(message=message, context={**e.context, "flow": flow}) from e
    except PostpadError:
        raise
    except Exception as e:
        logger.error("Unexpected error in %s: %s", flow, str(e), exc_info=True)
        raise DatabaseError(
            message=message,
            context={"flow": flow, "original_error": type(e).__name__},
        ) from e
