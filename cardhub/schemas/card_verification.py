"""DTO for card verification requests, results and events"""

from datetime import datetime
from enum import Enum

from cardhub.models.card_verification_event import (
    VerificationResult,
    VerificationType,
)
from cardhub.schemas.base import BaseFilterSchema, BaseReadSchema, BaseSchema
from cardhub.schemas.member import MemberBriefSchema
from cardhub.schemas.member_card import MemberCardSchema
from pydantic import Field


class VerificationFailure(Enum):
    NOT_FOUND = "not_found"
    CARD_PENDING = "card_pending"
    CARD_INACTIVE = "card_inactive"
    CARD_LOST = "card_lost"
    CARD_STOLEN = "card_stolen"
    CARD_DAMAGED = "card_damaged"
    CARD_EXPIRED = "card_expired"
    MEMBER_INELIGIBLE = "member_ineligible"
    MEMBER_NOT_FOUND = "member_not_found"
    INTERNAL_ERROR = "internal_error"


class OperatorAction(Enum):
    """What the point-of-care operator should do after a failed check"""

    RETRY = "retry"
    ESCALATE = "escalate"
    DENY = "deny"


class CardVerifyRequestSchema(BaseSchema):
    qr_code_data: str = Field(min_length=1)
    provider_id: str = Field(min_length=1)
    verification_type: VerificationType
    location: str | None = None
    device_info: str | None = None


class CardVerificationResultSchema(BaseSchema):
    valid: bool
    card: MemberCardSchema | None = None
    member: MemberBriefSchema | None = None
    reason: str | None = None
    failure_code: VerificationFailure | None = None
    action: OperatorAction | None = None
    verification_event_id: int | None = None


class CardVerificationEventSchema(BaseReadSchema):
    card_id: int | None = None
    member_id: int | None = None
    verified_by: str
    verification_type: VerificationType
    verification_result: VerificationResult
    location: str | None = None
    device_info: str | None = None
    reason: str | None = None


class CardVerificationEventFiltersSchema(BaseFilterSchema):
    card_id: int | None = None
    member_id: int | None = None
    verification_result: VerificationResult | None = None
    verification_type: VerificationType | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
