import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Float, ForeignKey, DateTime, Index, func
from sqlalchemy.dialects.postgresql import UUID, JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Prediction(Base):
    __tablename__ = "predictions"
    __table_args__ = (Index("ix_predictions_user_created", "user_id", "created_at"),)

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    # Anonymous predictions are kept without an owner
    user_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=True
    )
    latitude: Mapped[float] = mapped_column(Float, nullable=False)
    longitude: Mapped[float] = mapped_column(Float, nullable=False)
    tilt: Mapped[float] = mapped_column(Float, nullable=False)
    azimuth: Mapped[float] = mapped_column(Float, nullable=False)
    system_capacity_kw: Mapped[float] = mapped_column(Float, nullable=False)
    predicted_power_kw: Mapped[float] = mapped_column(Float, nullable=False)
    calculation_mode: Mapped[str] = mapped_column(
        String(20), nullable=False, default="advanced"
    )  # simple, advanced
    calibration_factor: Mapped[float] = mapped_column(Float, nullable=False, default=1.0)
    timestamp: Mapped[str] = mapped_column(String(64), nullable=False)  # weather observation time
    weather_data: Mapped[dict] = mapped_column(JSONB, nullable=False, default=dict)
    solar_geometry: Mapped[dict] = mapped_column(JSONB, nullable=False, default=dict)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, server_default=func.now()
    )

    user: Mapped["User | None"] = relationship(back_populates="predictions")  # noqa: F821
