"""SQLAlchemy ORM models for executed trades and archived opportunities."""

from datetime import datetime

from sqlalchemy import JSON, Float, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.types import DateTime

from pulse_core.db.base import Base

JSONType = JSON().with_variant(JSONB(), "postgresql")


class TradeRow(Base):
    __tablename__ = "trades"

    id: Mapped[str] = mapped_column(Text, primary_key=True)
    opportunity_id: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    condition: Mapped[str] = mapped_column(Text, nullable=False)
    asset: Mapped[str] = mapped_column(Text, nullable=False)
    executed_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    execution_speed: Mapped[float] = mapped_column(Float, nullable=False)
    strategy: Mapped[dict] = mapped_column(JSONType, nullable=False)
    skill_signals: Mapped[dict | None] = mapped_column(JSONType, nullable=True)
    settled_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    pnl: Mapped[float | None] = mapped_column(Float, nullable=True)
    return_pct: Mapped[float | None] = mapped_column(Float, nullable=True)


class OpportunityHistoryRow(Base):
    __tablename__ = "opportunity_history"

    id: Mapped[str] = mapped_column(Text, primary_key=True)
    condition: Mapped[str] = mapped_column(Text, nullable=False)
    asset: Mapped[str] = mapped_column(Text, nullable=False)
    reason: Mapped[str] = mapped_column(Text, nullable=False)
    archived_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    payload: Mapped[dict] = mapped_column(JSONType, nullable=False)
