"""
SQLAlchemy models for stored city calculations.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import JSON, DateTime, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from cpi_app.database import Base


class CalculationHistory(Base):
    """
    One city record per user: every raw value, standardized score and
    comment computed so far, stored as a flat JSON mapping.
    """

    __tablename__ = "calculation_history"
    __table_args__ = (
        UniqueConstraint("user_id", "city", "country", name="uq_calculation_history_city"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    user_id: Mapped[str] = mapped_column(String(255), index=True)
    city: Mapped[str] = mapped_column(String(255))
    country: Mapped[str] = mapped_column(String(255))
    city_name: Mapped[Optional[str]] = mapped_column(String(255))

    fields: Mapped[Dict[str, Any]] = mapped_column(JSON, default=dict, nullable=False)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )

    def __repr__(self) -> str:
        return f"<CalculationHistory(id={self.id}, city='{self.city}', country='{self.country}')>"


class CityComparison(Base):
    """A named set of cities a user compares side by side."""

    __tablename__ = "city_comparisons"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    user_id: Mapped[str] = mapped_column(String(255), index=True)
    name: Mapped[str] = mapped_column(String(255))
    cities: Mapped[List[Dict[str, str]]] = mapped_column(JSON, default=list, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, nullable=False
    )

    def __repr__(self) -> str:
        return f"<CityComparison(id={self.id}, name='{self.name}')>"
