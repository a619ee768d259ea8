"""User accounts and ownership checks."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol, TypeVar

from fitness_journal.domain.common import new_id
from fitness_journal.domain.errors import (
    AlreadyExistsError,
    AuthError,
    NotFoundError,
    ValidationError,
)
from fitness_journal.domain.users import User, UserPatch
from fitness_journal.domain.validation import require_email, require_id, require_name
from fitness_journal.services.dtos import UserDTO, to_user_dto

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8

OwnedT = TypeVar("OwnedT")


class UserRepository(Protocol):
    """Persistence interface for users."""

    def get_by_id(self, user_id: str) -> User | None:
        """Return a user by id, if present."""

    def get_by_email(self, email: str) -> User | None:
        """Return a user by normalized email, if present."""

    def get_by_customer_id(self, customer_id: str) -> User | None:
        """Return a user by billing customer id, if present."""

    def save(self, user: User) -> None:
        """Insert or replace a user."""

    def delete(self, user_id: str) -> None:
        """Delete a user by id."""


class PasswordHasher(Protocol):
    """Hashes and verifies passwords."""

    def hash(self, password: str) -> str:
        """Return an encoded hash for the password."""

    def verify(self, password: str, hashed: str) -> bool:
        """Return whether the password matches the encoded hash."""


def load_user(users: UserRepository, user_id: object) -> User:
    """Validate the id and return the stored user or raise NotFoundError."""
    resolved_id = require_id(user_id, "user_id")
    user = users.get_by_id(resolved_id)
    if user is None:
        raise NotFoundError(f"User {resolved_id} not found")
    return user


def load_owned(
    getter: Callable[[str], OwnedT | None],
    entity_id: object,
    user_id: str,
    label: str,
) -> OwnedT:
    """Load an entity and check it belongs to the user.

    Missing entities raise NotFoundError; another user's entity raises AuthError.
    """
    resolved_id = require_id(entity_id, f"{label.lower()}_id")
    entity = getter(resolved_id)
    if entity is None:
        raise NotFoundError(f"{label} {resolved_id} not found")
    if entity.user_id != user_id:
        raise AuthError(f"{label} {resolved_id} does not belong to user {user_id}")
    return entity


def visible_to(entity: OwnedT | None, user_id: str) -> OwnedT | None:
    """Return the entity when it belongs to the user, else None."""
    if entity is None or entity.user_id != user_id:
        return None
    return entity


@dataclass(frozen=True)
class CreateUserRequest:
    name: str
    email: str
    password: str
    customer_id: str | None = None


@dataclass
class CreateUser:
    """Register a new account."""

    users: UserRepository
    password_hasher: PasswordHasher

    def execute(self, request: CreateUserRequest) -> UserDTO:
        name = require_name(request.name)
        email = require_email(request.email)
        if not isinstance(request.password, str) or (
            len(request.password) < MIN_PASSWORD_LENGTH
        ):
            raise ValidationError(
                f"password must be at least {MIN_PASSWORD_LENGTH} characters"
            )
        if self.users.get_by_email(email) is not None:
            raise AlreadyExistsError(f"User with email {email} already exists")
        if request.customer_id is not None and (
            self.users.get_by_customer_id(request.customer_id) is not None
        ):
            raise AlreadyExistsError(
                f"User with customer id {request.customer_id} already exists"
            )
        user = User(
            id=new_id(),
            name=name,
            email=email,
            hashed_password=self.password_hasher.hash(request.password),
            customer_id=request.customer_id,
        )
        self.users.save(user)
        logger.info("Registered user %s", user.id)
        return to_user_dto(user)


@dataclass
class GetUserById:
    users: UserRepository

    def execute(self, user_id: str) -> UserDTO | None:
        user = self.users.get_by_id(require_id(user_id, "user_id"))
        return to_user_dto(user) if user else None


@dataclass(frozen=True)
class UpdateUserRequest:
    user_id: str
    patch: UserPatch


@dataclass
class UpdateUser:
    users: UserRepository

    def execute(self, request: UpdateUserRequest) -> UserDTO:
        user = load_user(self.users, request.user_id)
        if request.patch.customer_id is not None:
            other = self.users.get_by_customer_id(request.patch.customer_id)
            if other is not None and other.id != user.id:
                raise AlreadyExistsError(
                    f"Customer id {request.patch.customer_id} is already in use"
                )
        user.apply(request.patch)
        self.users.save(user)
        return to_user_dto(user)


@dataclass
class DeleteUser:
    users: UserRepository

    def execute(self, user_id: str) -> None:
        user = load_user(self.users, user_id)
        self.users.delete(user.id)
        logger.info("Deleted user %s", user.id)
