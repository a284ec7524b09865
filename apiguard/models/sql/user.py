from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, Integer, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from apiguard.database.postgres import Base


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    roles: Mapped[str | None] = mapped_column(
        Text, comment="JSON array of role names, e.g. [\"ROLE_USER\"]"
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default=text("true")
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        server_default=text("now()"),
    )

    # Relationships
    api_keys: Mapped[list["ApiKey"]] = relationship(back_populates="user")  # noqa: F821

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username='{self.username}')>"
