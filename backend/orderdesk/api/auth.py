# backend/orderdesk/api/auth.py
import logging
from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession
from orderdesk.api.deps import get_current_user
from orderdesk.core.database import get_db
from orderdesk.core.security import verify_password, create_access_token
from orderdesk.models.user import User
from orderdesk.repositories.user_repository import UserRepository
from orderdesk.schemas.user import UserResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


class LoginRequest(BaseModel):
    username: str
    password: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserResponse


@router.post("/login", response_model=TokenResponse)
async def login(req: LoginRequest, db: AsyncSession = Depends(get_db)):
    user = await UserRepository(db).get_by_username(req.username)

    if not user or not verify_password(req.password, user.password_hash):
        logger.info(f"Failed login for {req.username}")
        raise HTTPException(status_code=401, detail="Invalid credentials")
    if not user.is_active:
        raise HTTPException(status_code=401, detail="Account is disabled")

    token = create_access_token(data={"sub": user.username, "role": user.role})
    return TokenResponse(access_token=token, user=UserResponse.model_validate(user))


@router.get("/me", response_model=UserResponse)
async def me(current_user: User = Depends(get_current_user)):
    return UserResponse.model_validate(current_user)
