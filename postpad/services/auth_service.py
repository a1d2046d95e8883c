"""
Postpad — Auth Service (Registration & Login Flows)
=====================================================

What:  The registration and login workflows, independent of HTTP.
How:   Composes UserStore, PasswordHasher and TokenIssuer. Each call receives
       the request's session and the app-scoped hasher/issuer; the service
       itself holds no state.
Who:   Called by the POST /register and POST /login route handlers.

Registration:
    ┌──────────┐   ┌──────────────┐   ┌─────────┐   ┌────────┐   ┌─────────┐
    │ Validate │──▶│ Email unique │──▶│  Hash   │──▶│ Create │──▶│  Issue  │
    │  fields  │   │  (400 dup)   │   │ (bcrypt)│   │  user  │   │  token  │
    └──────────┘   └──────────────┘   └─────────┘   └────────┘   └─────────┘

Login:
    lookup by email ──▶ bcrypt compare ──▶ issue token
    Either failure yields the same InvalidCredentialsError.
"""

import logging
from typing import Tuple

from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from postpad.auth.passwords import PasswordHasher
from postpad.auth.tokens import TokenIssuer
from postpad.exceptions import (
    DuplicateEmailError,
    DuplicateUserError,
    InvalidCredentialsError,
    ValidationError,
)
from postpad.models.user import User
from postpad.schemas.auth import LoginForm, RegisterForm, SessionIdentity
from postpad.services.errors import store_failures_as
from postpad.services.user_store import user_store

logger = logging.getLogger(__name__)


class AuthService:
    """Registration and login."""

    async def register(
        self,
        db: AsyncSession,
        form: RegisterForm,
        hasher: PasswordHasher,
        issuer: TokenIssuer,
    ) -> Tuple[User, str]:
        """
        Create an account and return it with a fresh session token.

        Raises:
            ValidationError:    a field is missing/blank or age is not a number (400)
            DuplicateUserError: the email is already registered (400)
            DatabaseError:      any store failure, message "Server error" (500)
        """
        missing = form.missing_fields()
        if missing:
            raise ValidationError(context={"missing": missing})

        try:
            age = int(form.age.strip())
        except ValueError:
            raise ValidationError(message="Age must be a number", field="age")

        email = form.email.strip()

        with store_failures_as("Server error", "register"):
            if await user_store.find_by_email(db, email) is not None:
                raise DuplicateUserError(context={"email": email})

            password_hash = await run_in_threadpool(hasher.hash, form.password)

            try:
                user = await user_store.create(
                    db,
                    username=form.username.strip(),
                    email=email,
                    password_hash=password_hash,
                    age=age,
                )
            except DuplicateEmailError as e:
                raise DuplicateUserError(context=e.context)

            await db.commit()

        identity = SessionIdentity(
            email=user.email,
            userid=str(user.id),
            username=user.username,
            age=user.age,
        )
        token = issuer.issue(identity.to_claims())
        logger.info("Registered user %s", user.id)
        return user, token

    async def login(
        self,
        db: AsyncSession,
        form: LoginForm,
        hasher: PasswordHasher,
        issuer: TokenIssuer,
    ) -> Tuple[User, str]:
        """
        Check credentials and return the user with a fresh session token.

        Raises:
            InvalidCredentialsError: unknown email or wrong password (400, same message)
            DatabaseError:           store failure, message "Internal server error" (500)
        """
        email = form.email.strip()
        if not email or not form.password:
            raise InvalidCredentialsError(context={"reason": "missing_fields"})

        with store_failures_as("Internal server error", "login"):
            user = await user_store.find_by_email(db, email)

        if user is None:
            raise InvalidCredentialsError(context={"reason": "unknown_email"})

        matches = await run_in_threadpool(hasher.verify, user.password, form.password)
        if not matches:
            raise InvalidCredentialsError(context={"reason": "password_mismatch"})

        identity = SessionIdentity(email=user.email, userid=str(user.id))
        token = issuer.issue(identity.to_claims())
        logger.info("User %s logged in", user.id)
        return user, token


auth_service = AuthService()
