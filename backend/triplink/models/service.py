"""
Service model — a bookable offering owned by a provider-role user.

`availability` is a JSON list of windows, each `{"startDate": ..., "endDate": ...}`
in ISO-8601. An empty list means the service can be booked for any range.
"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict, List, Optional

from sqlalchemy import JSON, DateTime, ForeignKey, Index, Integer, Numeric, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from triplink.database import Base


class Service(Base):
    __tablename__ = "services"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # NUMERIC(10, 2): monetary values are never stored as floats
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)

    location: Mapped[str] = mapped_column(String(200), nullable=False)
    provider_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id"), nullable=False
    )
    category: Mapped[str] = mapped_column(String(100), nullable=False)
    images: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)
    availability: Mapped[List[Dict[str, Any]]] = mapped_column(
        JSON, nullable=False, default=list
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    __table_args__ = (
        Index("idx_services_category", "category"),
        Index("idx_services_provider_id", "provider_id"),
    )

    def __repr__(self) -> str:
        return f"<Service(id={self.id}, title='{self.title}', price={self.price})>"
