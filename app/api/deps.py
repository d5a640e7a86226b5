from typing import Optional

from fastapi import Depends, Query, Request

from app.api.stats_utils.composer import StatsComposer
from app.core.cache import CacheStore, InvalidationCoordinator
from app.core.exceptions import AuthError, ForbiddenError
from app.core.store import Store
from app.models.db.User import User


def get_store(request: Request) -> Store:
    return request.app.state.store


def get_cache(request: Request) -> CacheStore:
    return request.app.state.cache


def get_invalidator(request: Request) -> InvalidationCoordinator:
    return request.app.state.invalidator


def get_composer(request: Request) -> StatsComposer:
    return request.app.state.composer


async def admin_only(
    id: Optional[str] = Query(None, description="Id of the requesting admin"),
    store: Store = Depends(get_store),
) -> User:
    if not id:
        raise AuthError("You are not logged in")

    user = await store.users.get(id)
    if user is None:
        raise AuthError("User not found")

    if user.role != "admin":
        raise ForbiddenError("You are not an admin")

    return user
