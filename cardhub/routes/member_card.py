"""API routes for MemberCard issuance, lifecycle and verification"""

from datetime import datetime

from cardhub.dependencies.services import (
    get_card_analytics_service,
    get_card_verification_service,
    get_member_card_service,
)
from cardhub.errors.member import MemberAccessDenied
from cardhub.middlewares.token import get_api_token, get_member_from_token
from cardhub.models.member import Member
from cardhub.schemas.base import PaginationSchema, ResponseSchema
from cardhub.schemas.card_analytics import CardUsageStatisticsSchema
from cardhub.schemas.card_verification import (
    CardVerificationEventFiltersSchema,
    CardVerificationEventSchema,
    CardVerificationResultSchema,
    CardVerifyRequestSchema,
)
from cardhub.schemas.member_card import (
    CardGenerateSchema,
    CardReplaceSchema,
    CardStatusUpdateSchema,
    DigitalCardDownloadSchema,
    MemberCardSchema,
)
from cardhub.services.card_analytics import CardAnalyticsService
from cardhub.services.card_verification import CardVerificationService
from cardhub.services.member_card import MemberCardService
from fastapi import APIRouter, Depends

member_card_router = APIRouter(prefix="/cards", tags=["Member cards"])

# static paths are declared before /cards/{card_id}


@member_card_router.post(
    "/generate", response_model=ResponseSchema[list[MemberCardSchema]]
)
def generate_cards(
    request: CardGenerateSchema,
    member_card_service: MemberCardService = Depends(get_member_card_service),
    api_token: str = Depends(get_api_token),
):
    cards = member_card_service.generate(request)
    return {"data": cards, "message": f"{len(cards)} card(s) issued"}


@member_card_router.post(
    "/verify", response_model=ResponseSchema[CardVerificationResultSchema]
)
def verify_card(
    request: CardVerifyRequestSchema,
    card_verification_service: CardVerificationService = Depends(
        get_card_verification_service
    ),
    api_token: str = Depends(get_api_token),
):
    result = card_verification_service.verify(
        request.qr_code_data,
        verified_by=request.provider_id,
        verification_type=request.verification_type,
        location=request.location,
        device_info=request.device_info,
    )
    return {
        "data": result,
        "message": "Card is valid" if result.valid else result.reason,
    }


@member_card_router.get(
    "/verifications",
    response_model=ResponseSchema[PaginationSchema[CardVerificationEventSchema]],
)
def read_verifications(
    filters: CardVerificationEventFiltersSchema = Depends(),
    skip: int = 0,
    limit: int = 100,
    card_verification_service: CardVerificationService = Depends(
        get_card_verification_service
    ),
    api_token: str = Depends(get_api_token),
):
    return {"data": card_verification_service.get_all(filters, skip, limit)}


@member_card_router.get(
    "/analytics/usage", response_model=ResponseSchema[CardUsageStatisticsSchema]
)
def read_usage_statistics(
    member_id: int | None = None,
    start_date: datetime | None = None,
    end_date: datetime | None = None,
    card_analytics_service: CardAnalyticsService = Depends(
        get_card_analytics_service
    ),
    api_token: str = Depends(get_api_token),
):
    return {
        "data": card_analytics_service.usage_statistics(
            member_id, start_date, end_date
        )
    }


@member_card_router.get(
    "/member/active-cards/{member_id}",
    response_model=ResponseSchema[list[MemberCardSchema]],
)
def read_own_active_cards(
    member_id: int,
    member_card_service: MemberCardService = Depends(get_member_card_service),
    actor_member: Member = Depends(get_member_from_token),
):
    if actor_member.id != member_id:
        raise MemberAccessDenied(f"member id={member_id}")
    return {"data": member_card_service.get_active_by_member(member_id)}


@member_card_router.get(
    "/member/download-card/{card_id}",
    response_model=ResponseSchema[DigitalCardDownloadSchema],
)
def download_digital_card(
    card_id: int,
    member_card_service: MemberCardService = Depends(get_member_card_service),
    actor_member: Member = Depends(get_member_from_token),
):
    return {"data": member_card_service.get_download(card_id, actor_member)}


@member_card_router.get(
    "/member/{member_id}", response_model=ResponseSchema[list[MemberCardSchema]]
)
def read_member_cards(
    member_id: int,
    member_card_service: MemberCardService = Depends(get_member_card_service),
    api_token: str = Depends(get_api_token),
):
    return {"data": member_card_service.get_by_member(member_id)}


@member_card_router.get("/{card_id}", response_model=ResponseSchema[MemberCardSchema])
def read_card(
    card_id: int,
    member_card_service: MemberCardService = Depends(get_member_card_service),
    api_token: str = Depends(get_api_token),
):
    return {"data": member_card_service.get(card_id)}


@member_card_router.put(
    "/{card_id}/status", response_model=ResponseSchema[MemberCardSchema]
)
def update_card_status(
    card_id: int,
    status_update: CardStatusUpdateSchema,
    member_card_service: MemberCardService = Depends(get_member_card_service),
    api_token: str = Depends(get_api_token),
):
    card = member_card_service.update_status(
        card_id,
        status_update.status,
        reason=status_update.reason,
        notes=status_update.notes,
        expected_version=status_update.expected_version,
    )
    return {"data": card, "message": f"Card is now {card.card_status.value}"}


@member_card_router.post(
    "/{card_id}/replace", response_model=ResponseSchema[MemberCardSchema]
)
def replace_card(
    card_id: int,
    replacement: CardReplaceSchema,
    member_card_service: MemberCardService = Depends(get_member_card_service),
    api_token: str = Depends(get_api_token),
):
    card = member_card_service.request_replacement(
        card_id, replacement.reason, replacement.expedited
    )
    return {"data": card, "message": "Replacement card issued"}


@member_card_router.get(
    "/{card_id}/verifications",
    response_model=ResponseSchema[PaginationSchema[CardVerificationEventSchema]],
)
def read_card_verifications(
    card_id: int,
    skip: int = 0,
    limit: int = 100,
    card_verification_service: CardVerificationService = Depends(
        get_card_verification_service
    ),
    api_token: str = Depends(get_api_token),
):
    return {"data": card_verification_service.get_by_card(card_id, skip, limit)}
