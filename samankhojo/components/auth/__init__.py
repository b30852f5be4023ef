"""
Auth component - Registration and login checks.
"""

from ._impl import AuthService, validate_registration
from .models import AuthValidationError, RegisterInput
from .ports import PasswordHasherPort, UserRepoPort

__all__ = [
    "AuthService",
    "AuthValidationError",
    "RegisterInput",
    "PasswordHasherPort",
    "UserRepoPort",
    "validate_registration",
]
