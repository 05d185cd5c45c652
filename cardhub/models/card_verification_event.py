"""Card verification event model. Immutable audit record of one verification."""

import enum

from cardhub.models.base import BaseModel
from sqlalchemy import Enum, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column


class VerificationType(enum.Enum):
    QR_SCAN = "qr_scan"
    MANUAL_ENTRY = "manual_entry"
    NFC_TAP = "nfc_tap"


class VerificationResult(enum.Enum):
    SUCCESS = "success"
    FAILED = "failed"


class CardVerificationEvent(BaseModel):
    __tablename__ = "card_verification_events"

    # both are NULL when the presented token did not resolve
    card_id: Mapped[int | None] = mapped_column(
        ForeignKey("member_cards.id"), nullable=True, index=True
    )
    member_id: Mapped[int | None] = mapped_column(
        ForeignKey("members.id"), nullable=True, index=True
    )

    verified_by: Mapped[str]
    verification_type: Mapped[VerificationType] = mapped_column(
        Enum(
            VerificationType,
            values_callable=lambda enum_cls: [e.value for e in enum_cls],
            name="verification_type",
        ),
        nullable=False,
    )
    verification_result: Mapped[VerificationResult] = mapped_column(
        Enum(
            VerificationResult,
            values_callable=lambda enum_cls: [e.value for e in enum_cls],
            name="verification_result",
        ),
        nullable=False,
    )
    location: Mapped[str | None] = mapped_column(nullable=True)
    device_info: Mapped[str | None] = mapped_column(nullable=True)
    reason: Mapped[str | None] = mapped_column(nullable=True)
