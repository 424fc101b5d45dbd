"""User domain service."""

from typing import Optional
from billbook.database.base import Database
from billbook.domain.entities import User as UserEntity
from billbook.domain.errors import ConflictError, FieldError, duplicate_username
from billbook.domain.validation import raise_if_errors, required_text


class UserService:
    """Service for managing users.

    Passwords are hashed by the authentication layer before they reach this
    service; only the hash is stored.
    """

    def __init__(self, db: Database):
        self.db = db

    def create_user(self, username: str, password_hash: str) -> UserEntity:
        """Create a user.

        Raises:
            ValidationError: If username or password hash is empty
            ConflictError: If the username is taken
        """
        errors: list[FieldError] = []
        username = required_text(username, "username", errors)
        password_hash = required_text(password_hash, "password", errors)
        raise_if_errors(errors, "Invalid user data")

        if self.db.get_user_by_username(username) is not None:
            raise ConflictError(duplicate_username(username))

        return self.db.create_user(username=username, password=password_hash)

    def get_user(self, user_id: int) -> Optional[UserEntity]:
        return self.db.get_user(user_id)

    def get_user_by_username(self, username: str) -> Optional[UserEntity]:
        return self.db.get_user_by_username(username)
