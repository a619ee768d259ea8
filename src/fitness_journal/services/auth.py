"""Session tokens and login."""

import logging
from dataclasses import dataclass
from typing import Protocol

from fitness_journal.domain.errors import AuthError, ValidationError
from fitness_journal.services.dtos import UserDTO, to_user_dto
from fitness_journal.services.users import PasswordHasher, UserRepository

logger = logging.getLogger(__name__)


class AuthService(Protocol):
    """Issues and verifies signed session tokens."""

    def generate_token(self, user_id: str) -> str:
        """Return a signed token for the user."""

    def validate_token(self, token: str) -> bool:
        """Return whether the token is well-formed, signed and unexpired."""

    def get_current_user_id_from_token(self, token: str) -> str:
        """Return the user id carried by the token or raise AuthError."""


@dataclass(frozen=True)
class LoginRequest:
    email: str
    password: str


@dataclass(frozen=True)
class LoginResult:
    token: str
    user: UserDTO


@dataclass
class Login:
    """Check credentials and issue a session token."""

    users: UserRepository
    password_hasher: PasswordHasher
    auth_service: AuthService

    def execute(self, request: LoginRequest) -> LoginResult:
        if not isinstance(request.email, str) or not request.email.strip():
            raise ValidationError("email is required")
        if not isinstance(request.password, str) or not request.password:
            raise ValidationError("password is required")
        user = self.users.get_by_email(request.email.strip().lower())
        if user is None or not self.password_hasher.verify(
            request.password, user.hashed_password
        ):
            logger.info("Rejected login attempt")
            raise AuthError("Invalid email or password")
        token = self.auth_service.generate_token(user.id)
        return LoginResult(token=token, user=to_user_dto(user))
