"""
Request body reader shared by the form-handling routes.

The pages post urlencoded forms; API-style clients may send the same fields
as a JSON object. Both come out as a plain dict for the form models.
"""

import json
import logging
from typing import Any, Dict

from fastapi import Request

from postpad.exceptions import ValidationError

logger = logging.getLogger(__name__)


def _is_json(request: Request) -> bool:
    media_type = request.headers.get("content-type", "").split(";", 1)[0].strip().lower()
    return media_type == "application/json" or media_type.endswith("+json")


async def read_payload(request: Request) -> Dict[str, Any]:
    """Decoded body fields; a non-object JSON body yields no fields."""
    if _is_json(request):
        raw = await request.body()
        if not raw.strip():
            return {}
        try:
            data = json.loads(raw)
        except ValueError as e:
            logger.info("Malformed JSON body on %s: %s", request.url.path, e)
            raise ValidationError(message="Bad request", context={"body": "invalid_json"})
        return data if isinstance(data, dict) else {}

    form = await request.form()
    return {key: value for key, value in form.items() if isinstance(value, str)}
