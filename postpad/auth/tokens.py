from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt

from postpad.config import Settings
from postpad.exceptions import InvalidOrExpiredToken

logger = logging.getLogger(__name__)

DEFAULT_TTL = timedelta(hours=1)


class TokenIssuer:
    """Issues and verifies the signed, time-limited session credential."""

    def __init__(self, secret: str, algorithm: str = "HS256", ttl: timedelta = DEFAULT_TTL):
        if not secret:
            raise ValueError("A signing secret is required")
        self._secret = secret
        self.algorithm = algorithm
        self.ttl = ttl

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenIssuer":
        return cls(
            secret=settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
            ttl=timedelta(seconds=settings.session_ttl_seconds),
        )

    def issue(
        self,
        claims: Dict[str, Any],
        ttl: Optional[timedelta] = None,
        now: Optional[datetime] = None,
    ) -> str:
        issued_at = now or datetime.now(timezone.utc)
        payload = dict(claims)
        payload["iat"] = issued_at
        payload["exp"] = issued_at + (ttl or self.ttl)
        return jwt.encode(payload, self._secret, algorithm=self.algorithm)

    def verify(self, token: str) -> Dict[str, Any]:
        if not token:
            raise InvalidOrExpiredToken("Missing session token")
        try:
            return jwt.decode(
                token,
                self._secret,
                algorithms=[self.algorithm],
                options={"require": ["exp"]},
            )
        except jwt.ExpiredSignatureError:
            logger.info("Session token expired")
            raise InvalidOrExpiredToken("Session token expired")
        except jwt.InvalidTokenError as e:
            logger.warning("Invalid session token: %s", type(e).__name__)
            raise InvalidOrExpiredToken()
