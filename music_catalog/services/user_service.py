"""User lookups for resolving the acting principal."""
from typing import Optional, Union
from uuid import UUID

from ..core.exceptions import NotFoundError, ValidationError
from ..core.logging import get_logger
from ..models import Role, User
from .base import BaseService

logger = get_logger(__name__)


class UserService(BaseService):
    """Service for looking up and registering users."""

    resource = "user"

    async def get_user(self, user_id: UUID) -> User:
        """Get a user by ID."""
        user = await self.db.get(User, user_id)
        if user is None:
            logger.warning("user_not_found", user_id=str(user_id))
            raise NotFoundError(
                message=f"User {user_id} not found",
                details={"user_id": str(user_id)},
            )
        return user

    async def find_user(self, user_id: Optional[UUID]) -> Optional[User]:
        """Get a user by ID, or None for anonymous access."""
        if user_id is None:
            return None
        return await self.db.get(User, user_id)

    async def create_user(self, email: str, role: Union[Role, str] = Role.USER) -> User:
        """Register a user with the given role."""
        email = (email or "").strip().lower()
        if not email:
            raise ValidationError(message="email is required", details={"field": "email"})
        try:
            role = Role(role)
        except ValueError as e:
            raise ValidationError(
                message=f"Unknown role: {role}",
                details={"role": str(role), "allowed": [r.value for r in Role]},
            ) from e

        user = User(email=email, role=role)
        async with self._mutation("create"):
            self.db.add(user)

        logger.info("user_created", user_id=str(user.id), role=role.value)
        return user
