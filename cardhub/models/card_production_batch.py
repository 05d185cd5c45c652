"""Production batch model. Groups physical cards for printing and shipping."""

import enum
from datetime import datetime

from cardhub.models.base import BaseModel
from sqlalchemy import DateTime, Enum
from sqlalchemy.orm import Mapped, mapped_column


class BatchStatus(enum.Enum):
    PENDING = "pending"
    IN_PRODUCTION = "in_production"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class CardProductionBatch(BaseModel):
    __tablename__ = "card_production_batches"

    batch_number: Mapped[str] = mapped_column(unique=True, index=True)
    batch_name: Mapped[str]
    batch_type: Mapped[str] = mapped_column(default="physical")
    batch_status: Mapped[BatchStatus] = mapped_column(
        Enum(
            BatchStatus,
            values_callable=lambda enum_cls: [e.value for e in enum_cls],
            name="batch_status",
        ),
        nullable=False,
        default=BatchStatus.PENDING,
    )
    production_quantity: Mapped[int] = mapped_column(default=0, nullable=False)
    tracking_number: Mapped[str | None] = mapped_column(nullable=True)

    # True for the single batch accepting new cards, NULL for all others
    is_open: Mapped[bool | None] = mapped_column(nullable=True, unique=True)

    shipped_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    delivered_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
