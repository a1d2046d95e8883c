"""
Postpad — Submitted Form Models
=================================

What:  Base model for data posted by the HTML forms or by JSON clients.
How:   Every field is text. Scalars from a JSON body (numbers, booleans) are
       turned into their string form and null into "", so the flows run the
       same presence checks whichever encoding the client used.
"""

from typing import Any, Mapping

from pydantic import BaseModel, field_validator
from pydantic import ValidationError as PydanticValidationError

from postpad.exceptions import ValidationError


class FormModel(BaseModel):
    """Text-only submitted fields; unknown keys are ignored."""

    @field_validator("*", mode="before")
    @classmethod
    def scalar_to_text(cls, v: Any) -> Any:
        if v is None:
            return ""
        if isinstance(v, (bool, int, float)):
            return str(v)
        return v

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]):
        """Build from a decoded body; nested values are a 400, not a crash."""
        try:
            return cls.model_validate(dict(payload))
        except PydanticValidationError as e:
            fields = [".".join(str(p) for p in err["loc"]) for err in e.errors()]
            raise ValidationError(context={"invalid": fields}) from e
