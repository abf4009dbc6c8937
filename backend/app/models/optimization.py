import uuid
from datetime import datetime

from sqlalchemy import Float, ForeignKey, DateTime, Index, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.database import Base
from app.models.prediction import _utcnow


class Optimization(Base):
    __tablename__ = "optimizations"
    __table_args__ = (Index("ix_optimizations_user_created", "user_id", "created_at"),)

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    user_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=True
    )
    latitude: Mapped[float] = mapped_column(Float, nullable=False)
    longitude: Mapped[float] = mapped_column(Float, nullable=False)
    optimal_tilt: Mapped[float] = mapped_column(Float, nullable=False)
    optimal_azimuth: Mapped[float] = mapped_column(Float, nullable=False)
    max_power_kw: Mapped[float] = mapped_column(Float, nullable=False)
    current_tilt: Mapped[float] = mapped_column(Float, nullable=False)
    current_azimuth: Mapped[float] = mapped_column(Float, nullable=False)
    current_power_kw: Mapped[float] = mapped_column(Float, nullable=False)
    improvement_percentage: Mapped[float] = mapped_column(Float, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, server_default=func.now()
    )

    user: Mapped["User | None"] = relationship(back_populates="optimizations")  # noqa: F821
