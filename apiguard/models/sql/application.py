from datetime import datetime, timezone

from sqlalchemy import DateTime, Integer, String, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from apiguard.database.postgres import Base


class Application(Base):
    __tablename__ = "applications"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    secret: Mapped[str] = mapped_column(
        String(255), nullable=False, unique=True, index=True,
        comment="Sent by clients in the X-API-App-Secret header",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        server_default=text("now()"),
    )

    # Relationships
    api_keys: Mapped[list["ApiKey"]] = relationship(back_populates="application")  # noqa: F821

    def __repr__(self) -> str:
        return f"<Application(id={self.id}, name='{self.name}')>"
