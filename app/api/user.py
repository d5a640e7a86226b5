from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from app.api.deps import admin_only, get_invalidator, get_store
from app.core.cache import InvalidationCoordinator, InvalidationEvent
from app.core.exceptions import ValidationError
from app.core.store import Store
from app.models.db.Order import Order
from app.models.db.User import User
from app.models.user.UserModels import NewUserModel, UserOut

router = APIRouter()


def dump_user(user: User) -> dict:
    return UserOut.model_validate(user).model_dump(mode="json")


@router.post("/new", status_code=status.HTTP_201_CREATED)
async def new_user(
    user_data: NewUserModel,
    store: Store = Depends(get_store),
    invalidator: InvalidationCoordinator = Depends(get_invalidator),
):
    """Register a user; a known id is greeted instead of re-created."""
    if user_data.id:
        existing = await store.users.get(user_data.id)
        if existing:
            return JSONResponse(
                content={"success": True, "message": f"Welcome, {existing.name}"},
                status_code=status.HTTP_200_OK,
            )

    values = user_data.model_dump(exclude_none=True)
    user = await store.users.create(**values)

    # user counts, ratios and age groups feed every admin payload
    invalidator.invalidate(InvalidationEvent(admin_affected=True))

    return JSONResponse(
        content={"success": True, "message": f"Welcome, {user.name}", "id": user.id},
        status_code=status.HTTP_201_CREATED,
    )


@router.get("/all", status_code=status.HTTP_200_OK)
async def get_all_users(store: Store = Depends(get_store), admin=Depends(admin_only)):
    users = await store.users.find(order_by=User.created_at.desc())
    return JSONResponse(
        content={"success": True, "users": [dump_user(u) for u in users]}
    )


@router.get("/{user_id}", status_code=status.HTTP_200_OK)
async def get_user(user_id: str, store: Store = Depends(get_store)):
    user = await store.users.get_or_404(user_id)
    return JSONResponse(content={"success": True, "user": dump_user(user)})


@router.delete("/{user_id}", status_code=status.HTTP_200_OK)
async def delete_user(
    user_id: str,
    store: Store = Depends(get_store),
    invalidator: InvalidationCoordinator = Depends(get_invalidator),
    admin=Depends(admin_only),
):
    # orders reference their user
    if await store.orders.count(Order.user_id == user_id):
        raise ValidationError("User has orders")

    await store.users.delete(user_id)

    invalidator.invalidate(InvalidationEvent(admin_affected=True))

    return JSONResponse(
        content={"success": True, "message": "User deleted successfully"}
    )
