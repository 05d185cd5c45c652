"""DTO for MemberCard"""

from datetime import datetime
from enum import Enum

from cardhub.models.member_card import CardStatus, CardType
from cardhub.schemas.base import BaseReadSchema, BaseSchema
from cardhub.schemas.card_template import CardTemplateSchema
from cardhub.schemas.member import MemberBriefSchema
from pydantic import Field


class CardTypeRequest(Enum):
    PHYSICAL = "physical"
    DIGITAL = "digital"
    BOTH = "both"


class MemberCardSchema(BaseReadSchema):
    member_id: int
    template_id: int
    card_type: CardType
    card_status: CardStatus
    issued_at: datetime
    activated_at: datetime | None = None
    last_used_at: datetime | None = None
    deactivated_at: datetime | None = None
    deactivation_reason: str | None = None
    expires_at: datetime
    status_notes: str | None = None
    shipping_address: str | None = None
    expedited_shipping: bool
    tracking_number: str | None = None
    shipped_at: datetime | None = None
    production_batch_id: int | None = None
    replacement_requested: bool
    replacement_reason: str | None = None
    previous_card_id: int | None = None
    version: int
    # verification_token is only exposed by DigitalCardDownloadSchema


class CardGenerateSchema(BaseSchema):
    member_id: int
    card_type: CardTypeRequest
    template_id: int | None = None
    company_id: int | None = None
    expedited_shipping: bool = False
    shipping_address: str | None = None


class CardStatusUpdateSchema(BaseSchema):
    status: CardStatus
    reason: str | None = None
    notes: str | None = None
    expected_version: int | None = None


class CardReplaceSchema(BaseSchema):
    reason: str = Field(min_length=1)
    expedited: bool = False


class DigitalCardDownloadSchema(BaseSchema):
    """Everything a member's wallet app needs to render the card and its QR."""

    card: MemberCardSchema
    member: MemberBriefSchema
    template: CardTemplateSchema
    qr_code_data: str
