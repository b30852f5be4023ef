"""
AuthService - Customer registration and credential checks.

Every self-registered account is a customer. Admin roles are assigned
out of band.
"""

from __future__ import annotations

import logging
import re
from uuid import uuid4

from samankhojo.domain.entities import User
from samankhojo.rules.models import AuthRules

from .models import AuthValidationError, RegisterInput
from .ports import ClockPort, PasswordHasherPort, UserRepoPort

logger = logging.getLogger(__name__)

_EMAIL = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def validate_registration(inp: RegisterInput, rules: AuthRules) -> list[AuthValidationError]:
    errors: list[AuthValidationError] = []
    if not _EMAIL.match(inp.email.strip()):
        errors.append(AuthValidationError(code="email_invalid", message="Email is invalid", field="email"))
    if len(inp.password) < rules.password_min_length:
        errors.append(
            AuthValidationError(
                code="password_too_short",
                message=f"Password must be at least {rules.password_min_length} characters",
                field="password",
            )
        )
    if not inp.display_name.strip():
        errors.append(
            AuthValidationError(
                code="display_name_required", message="Display name is required", field="display_name"
            )
        )
    return errors


class AuthService:
    def __init__(
        self,
        repo: UserRepoPort,
        hasher: PasswordHasherPort,
        clock: ClockPort,
        rules: AuthRules,
    ) -> None:
        self._repo = repo
        self._hasher = hasher
        self._clock = clock
        self._rules = rules

    def register(self, inp: RegisterInput) -> tuple[User | None, list[AuthValidationError]]:
        errors = validate_registration(inp, self._rules)
        if errors:
            return None, errors

        email = inp.email.strip().lower()
        if self._repo.get_by_email(email):
            return None, [
                AuthValidationError(code="email_taken", message="Email is already registered", field="email")
            ]

        now = self._clock.now_utc()
        user = User(
            id=uuid4(),
            email=email,
            display_name=inp.display_name.strip(),
            phone=inp.phone,
            password_hash=self._hasher.hash_password(inp.password),
            roles=["customer"],
            created_at=now,
            updated_at=now,
        )
        saved = self._repo.save(user)
        logger.info("Registered user %s", saved.id)
        return saved, []

    def authenticate(self, email: str, password: str) -> User | None:
        """Return the user for valid credentials, otherwise None."""
        user = self._repo.get_by_email(email.strip().lower())
        if not user or not self._hasher.verify_password(password, user.password_hash):
            return None
        return user
