"""
Postpad — Authentication Schemas
==================================

What:  Pydantic models for the registration/login forms and for the identity
       carried by a session token.
How:   Form models hold text (a JSON `age` of 30 arrives as "30") and expose
       `missing_fields()` so the auth flow can answer with its own 400
       instead of FastAPI's automatic 422.
"""

from typing import List, Optional

from pydantic import BaseModel, Field

from postpad.schemas.forms import FormModel


class RegisterForm(FormModel):
    """Fields posted by the registration form."""
    username: str = Field(default="")
    email: str = Field(default="")
    password: str = Field(default="")
    age: str = Field(default="")

    def missing_fields(self) -> List[str]:
        return [
            name
            for name in ("username", "email", "password", "age")
            if not getattr(self, name).strip()
        ]


class LoginForm(FormModel):
    """Fields posted by the login form."""
    email: str = Field(default="")
    password: str = Field(default="")


class SessionIdentity(BaseModel):
    """
    The authenticated identity handed to gated route handlers.

    Built by the session gate from verified token claims; frozen so handlers
    cannot alter who the request is acting as.
    """
    email: str
    userid: str
    username: Optional[str] = None
    age: Optional[int] = None

    model_config = {"frozen": True}

    @classmethod
    def from_claims(cls, claims: dict) -> "SessionIdentity":
        return cls(
            email=str(claims["email"]),
            userid=str(claims["userid"]),
            username=claims.get("username"),
            age=claims.get("age"),
        )

    def to_claims(self) -> dict:
        """Claims payload for the token issuer; optional fields only when set."""
        claims = {"email": self.email, "userid": self.userid}
        if self.username is not None:
            claims["username"] = self.username
        if self.age is not None:
            claims["age"] = self.age
        return claims
