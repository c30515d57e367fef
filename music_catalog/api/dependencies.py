"""Request dependencies shared by the API routers."""
from typing import Optional
from uuid import UUID

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.db import get_db
from ..core.logging import get_logger
from ..models import User
from ..services import UserService

logger = get_logger(__name__)


async def get_actor(
    x_user_id: Optional[UUID] = Header(None, description="ID of the acting user"),
    db: AsyncSession = Depends(get_db),
) -> Optional[User]:
    """Resolve the acting user from the request. Unknown or missing IDs are anonymous."""
    actor = await UserService(db).find_user(x_user_id)
    if x_user_id is not None and actor is None:
        logger.warning("unknown_actor", user_id=str(x_user_id))
    return actor
