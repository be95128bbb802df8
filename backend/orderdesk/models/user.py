# backend/orderdesk/models/user.py
from datetime import datetime
from sqlalchemy import Boolean, String
from sqlalchemy.orm import Mapped, mapped_column
from orderdesk.core.database import Base


class UserRole:
    ADMIN = "admin"
    USER = "user"

    @classmethod
    def all(cls) -> list[str]:
        return [cls.ADMIN, cls.USER]


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(20), default=UserRole.USER, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    created_at: Mapped[datetime] = mapped_column(default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        default=datetime.utcnow, onupdate=datetime.utcnow
    )

    def __init__(self, **kwargs):
        kwargs.setdefault("role", UserRole.USER)
        kwargs.setdefault("is_active", True)
        super().__init__(**kwargs)

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN
