"""Account creation, password policy and sessions."""

from gospelera.auth.models import PasswordValidationResult
from gospelera.auth.password import PASSWORD_REQUIREMENTS_MESSAGE, validate_password

__all__ = ["PASSWORD_REQUIREMENTS_MESSAGE", "PasswordValidationResult", "validate_password"]
