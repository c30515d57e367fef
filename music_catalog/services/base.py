"""Shared transaction, policy and validation handling for catalog services."""
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Mapping, Optional, Type

from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.exceptions import AuthorizationError, StorageError, ValidationError
from ..core.logging import get_logger
from ..metrics import mutations_total
from ..models import User
from . import policy
from .attributes import validate_attributes
from .policy import Action

logger = get_logger(__name__)


class BaseService:
    """Base for services that own a database session."""

    resource = "record"

    def __init__(self, db: AsyncSession):
        """Initialize service with database session."""
        self.db = db

    def _ensure(self, actor: Optional[User], action: Action, record: Any = None) -> None:
        """Check the policy before any write is attempted."""
        try:
            policy.ensure_authorized(actor, action, record, resource=self.resource)
        except AuthorizationError:
            mutations_total.labels(resource=self.resource, action=action.value, outcome="denied").inc()
            raise

    def _validate(
        self,
        model: Type[BaseModel],
        attributes: Optional[Mapping[str, Any]],
        action: Action,
    ) -> Dict[str, Any]:
        try:
            return validate_attributes(model, attributes)
        except ValidationError as e:
            mutations_total.labels(resource=self.resource, action=action.value, outcome="invalid").inc()
            logger.info(f"{self.resource}_{action.value}_invalid", errors=e.details.get("errors"))
            raise

    @asynccontextmanager
    async def _mutation(self, action: str) -> AsyncIterator[AsyncSession]:
        """Run a write as one transaction: commit on success, roll back on any error.

        Store failures are raised as StorageError and not retried.
        """
        try:
            yield self.db
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            mutations_total.labels(resource=self.resource, action=action, outcome="error").inc()
            logger.error(f"{self.resource}_{action}_failed", error=str(e), exc_info=True)
            raise StorageError(
                message=f"Failed to {action} {self.resource}",
                details={"resource": self.resource, "action": action},
            ) from e
        except BaseException:
            await self.db.rollback()
            raise
        mutations_total.labels(resource=self.resource, action=action, outcome="success").inc()
