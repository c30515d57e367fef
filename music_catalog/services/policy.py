"""Role-based policies for catalog mutations."""
import enum
from typing import Any, Dict, FrozenSet, Optional, Tuple, Union

from ..core.exceptions import AuthorizationError
from ..core.logging import get_logger
from ..models import Role, User
from ..metrics import authorization_denials_total

logger = get_logger(__name__)


class Action(str, enum.Enum):
    """Actions a policy can gate."""
    READ = "read"
    CREATE = "create"
    UPDATE = "update"
    DESTROY = "destroy"


EVERYONE = "everyone"

# (resource, action) -> roles allowed. Reads are also open to anonymous actors.
POLICIES: Dict[Tuple[str, Action], Union[str, FrozenSet[Role]]] = {
    ("artist", Action.READ): EVERYONE,
    ("artist", Action.CREATE): frozenset({Role.ADMIN}),
    ("artist", Action.UPDATE): frozenset({Role.ADMIN, Role.EDITOR}),
    ("artist", Action.DESTROY): frozenset({Role.ADMIN}),
    ("album", Action.READ): EVERYONE,
    ("album", Action.CREATE): frozenset({Role.ADMIN, Role.EDITOR}),
    ("album", Action.UPDATE): frozenset({Role.ADMIN, Role.EDITOR}),
    ("album", Action.DESTROY): frozenset({Role.ADMIN, Role.EDITOR}),
}


def authorize(
    actor: Optional[User],
    action: Action,
    record: Any = None,
    resource: str = "artist",
) -> bool:
    """Decide whether ``actor`` may perform ``action`` on ``resource``.

    ``record`` is accepted so callers can pass the target, but no current
    rule depends on it. Unknown (resource, action) pairs are denied.
    """
    allowed = POLICIES.get((resource, Action(action)))
    if allowed is None:
        return False
    if allowed == EVERYONE:
        return True
    if actor is None:
        return False
    return Role(actor.role) in allowed


def ensure_authorized(
    actor: Optional[User],
    action: Action,
    record: Any = None,
    resource: str = "artist",
) -> None:
    """Raise AuthorizationError when the policy denies the action."""
    if authorize(actor, action, record, resource):
        return

    action = Action(action)
    authorization_denials_total.labels(resource=resource, action=action.value).inc()
    logger.warning(
        "authorization_denied",
        resource=resource,
        action=action.value,
        actor_id=str(actor.id) if actor is not None else None,
        role=Role(actor.role).value if actor is not None else None,
    )
    raise AuthorizationError(
        message=f"Not allowed to {action.value} {resource}",
        details={"resource": resource, "action": action.value},
    )


def can_create_artist(actor: Optional[User]) -> bool:
    return authorize(actor, Action.CREATE)


def can_update_artist(actor: Optional[User], artist: Any = None) -> bool:
    return authorize(actor, Action.UPDATE, artist)


def can_destroy_artist(actor: Optional[User], artist: Any = None) -> bool:
    return authorize(actor, Action.DESTROY, artist)


def can_create_album(actor: Optional[User]) -> bool:
    return authorize(actor, Action.CREATE, resource="album")


def can_update_album(actor: Optional[User], album: Any = None) -> bool:
    return authorize(actor, Action.UPDATE, album, resource="album")


def can_destroy_album(actor: Optional[User], album: Any = None) -> bool:
    return authorize(actor, Action.DESTROY, album, resource="album")
