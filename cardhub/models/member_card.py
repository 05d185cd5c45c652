"""Member card model. One physical or digital credential of a member."""

import enum
from datetime import datetime

from cardhub.models.base import BaseModel
from cardhub.models.card_production_batch import CardProductionBatch
from cardhub.models.card_template import CardTemplate
from cardhub.models.member import Member
from sqlalchemy import DateTime, Enum, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship


class CardType(enum.Enum):
    PHYSICAL = "physical"
    DIGITAL = "digital"


class CardStatus(enum.Enum):
    PENDING = "pending"
    ACTIVE = "active"
    INACTIVE = "inactive"
    EXPIRED = "expired"
    LOST = "lost"
    STOLEN = "stolen"
    DAMAGED = "damaged"


# statuses which carry deactivated_at / deactivation_reason
DEACTIVATED_STATUSES = frozenset(
    {
        CardStatus.INACTIVE,
        CardStatus.EXPIRED,
        CardStatus.LOST,
        CardStatus.STOLEN,
        CardStatus.DAMAGED,
    }
)


class MemberCard(BaseModel):
    __tablename__ = "member_cards"

    member_id: Mapped[int] = mapped_column(
        ForeignKey("members.id"), nullable=False, index=True
    )
    member: Mapped[Member] = relationship()

    template_id: Mapped[int] = mapped_column(
        ForeignKey("card_templates.id"), nullable=False
    )
    template: Mapped[CardTemplate] = relationship()

    card_type: Mapped[CardType] = mapped_column(
        Enum(
            CardType,
            values_callable=lambda enum_cls: [e.value for e in enum_cls],
            name="card_type",
        ),
        nullable=False,
    )
    card_status: Mapped[CardStatus] = mapped_column(
        Enum(
            CardStatus,
            values_callable=lambda enum_cls: [e.value for e in enum_cls],
            name="card_status",
        ),
        nullable=False,
        default=CardStatus.PENDING,
    )

    # opaque QR payload, never derived from ids
    verification_token: Mapped[str] = mapped_column(
        unique=True, index=True, nullable=False
    )

    issued_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    activated_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    last_used_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    deactivated_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    deactivation_reason: Mapped[str | None] = mapped_column(nullable=True)
    expires_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    status_notes: Mapped[str | None] = mapped_column(nullable=True)

    # physical cards only
    shipping_address: Mapped[str | None] = mapped_column(nullable=True)
    expedited_shipping: Mapped[bool] = mapped_column(default=False)
    tracking_number: Mapped[str | None] = mapped_column(nullable=True)
    shipped_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    production_batch_id: Mapped[int | None] = mapped_column(
        ForeignKey("card_production_batches.id"), nullable=True, index=True
    )
    production_batch: Mapped[CardProductionBatch | None] = relationship()

    replacement_requested: Mapped[bool] = mapped_column(default=False)
    replacement_reason: Mapped[str | None] = mapped_column(nullable=True)
    previous_card_id: Mapped[int | None] = mapped_column(
        ForeignKey("member_cards.id"), nullable=True
    )

    # optimistic concurrency counter, bumped by the ORM on every UPDATE
    version: Mapped[int] = mapped_column(nullable=False)

    __mapper_args__ = {"version_id_col": version}
