from __future__ import annotations

import logging

import bcrypt

logger = logging.getLogger(__name__)

# bcrypt only reads the first 72 bytes of a password
BCRYPT_MAX_BYTES = 72


def _secret_bytes(plain: str) -> bytes:
    return plain.encode("utf-8")[:BCRYPT_MAX_BYTES]


class PasswordHasher:
    """Salted bcrypt hashing with a configurable cost factor."""

    def __init__(self, rounds: int = 10):
        self.rounds = rounds

    def hash(self, plain: str) -> str:
        if not plain:
            raise ValueError("Password must not be empty")
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(_secret_bytes(plain), salt).decode("utf-8")

    def verify(self, hash_value: str, plain: str) -> bool:
        if not hash_value or not plain:
            return False
        try:
            return bcrypt.checkpw(_secret_bytes(plain), hash_value.encode("utf-8"))
        except ValueError as e:
            logger.warning("Password check failed against stored hash: %s", e)
            return False
