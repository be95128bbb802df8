# backend/orderdesk/api/users.py
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from orderdesk.api.deps import require_admin
from orderdesk.core.database import get_db
from orderdesk.core.security import hash_password
from orderdesk.models.user import User
from orderdesk.repositories.user_repository import UserRepository
from orderdesk.schemas.user import UserCreate, UserUpdate, UserResponse, UserListResponse
from orderdesk.services.events import ChangeAction, ChangeEvent, Collection, change_emitter

router = APIRouter(prefix="/api/users", tags=["users"])


def user_record(user: User) -> dict:
    # password hashes stay out of the live state
    return UserResponse.model_validate(user).model_dump(mode="json")


def _publish(action: ChangeAction, user: User) -> None:
    data = user_record(user) if action != ChangeAction.DELETE else None
    change_emitter.emit(ChangeEvent(Collection.USERS, action, user.username, data))


@router.get("", response_model=UserListResponse)
async def list_users(
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """List all users (admin only)."""
    users = await UserRepository(db).list_all()
    return UserListResponse(
        items=[UserResponse.model_validate(u) for u in users],
        total=len(users)
    )


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    user_data: UserCreate,
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Create a user (admin only)."""
    repo = UserRepository(db)
    if await repo.exists(user_data.username):
        raise HTTPException(status_code=400, detail="Username already exists")

    user = await repo.create(User(
        username=user_data.username,
        password_hash=hash_password(user_data.password),
        role=user_data.role,
        is_active=user_data.is_active,
        email=user_data.email,
    ))
    _publish(ChangeAction.CREATE, user)
    return UserResponse.model_validate(user)


@router.put("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: int,
    user_data: UserUpdate,
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Update a user (admin only)."""
    repo = UserRepository(db)
    user = await repo.get_by_id(user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    if user_data.email is not None:
        user.email = user_data.email
    if user_data.role is not None:
        user.role = user_data.role
    if user_data.is_active is not None:
        user.is_active = user_data.is_active
    if user_data.password:
        user.password_hash = hash_password(user_data.password)

    user = await repo.save(user)
    _publish(ChangeAction.UPDATE, user)
    return UserResponse.model_validate(user)


@router.post("/{user_id}/toggle-active", response_model=UserResponse)
async def toggle_user_active(
    user_id: int,
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Enable or disable a user (admin only)."""
    if user_id == current_user.id:
        raise HTTPException(status_code=400, detail="Cannot deactivate yourself")

    repo = UserRepository(db)
    user = await repo.get_by_id(user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    user.is_active = not user.is_active
    user = await repo.save(user)
    _publish(ChangeAction.UPDATE, user)
    return UserResponse.model_validate(user)


@router.delete("/{user_id}")
async def delete_user(
    user_id: int,
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Delete a user (admin only)."""
    if user_id == current_user.id:
        raise HTTPException(status_code=400, detail="Cannot delete yourself")

    repo = UserRepository(db)
    user = await repo.get_by_id(user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    await repo.delete(user)
    _publish(ChangeAction.DELETE, user)
    return {"message": "User deleted"}
