from datetime import datetime, timezone

from nanoid import generate
from sqlalchemy import DateTime, Float, String
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class Coupon(Base):
    __tablename__ = "coupons"

    id: Mapped[str] = mapped_column(
        String(32), primary_key=True, index=True, default=lambda: generate(size=20)
    )
    code: Mapped[str] = mapped_column(String, unique=True, index=True, nullable=False)
    amount: Mapped[float] = mapped_column(Float, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )
