"""Plan ORM — the purchasable tier catalog.

Invariants:
    - position keeps catalog order stable across updates
    - features is an ordered JSON array of strings
    - deleting a plan never touches subscriptions (no FK from subscriptions)
"""

from decimal import Decimal

from sqlalchemy import String, Text, Integer, Numeric, Boolean, JSON
from sqlalchemy.orm import Mapped, mapped_column

from subsflow.db.base import Base


class PlanRow(Base):
    __tablename__ = "plans"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    duration_days: Mapped[int] = mapped_column(Integer, nullable=False)
    features: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True,
    )
