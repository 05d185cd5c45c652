"""Member card service. Issues cards and owns the card status state machine."""

import datetime
import logging

from cardhub.config import Config, get_config
from cardhub.errors.card import (
    CardNotDownloadable,
    CardNotOwned,
    CardVersionConflict,
    InvalidCardTransition,
)
from cardhub.errors.member import IneligibleMember
from cardhub.models.card_template import CardTemplate
from cardhub.models.member import Member
from cardhub.models.member_card import (
    DEACTIVATED_STATUSES,
    CardStatus,
    CardType,
    MemberCard,
)
from cardhub.schemas.member_card import CardGenerateSchema, CardTypeRequest
from cardhub.services.base import BaseService
from cardhub.services.card_production_batch import CardProductionBatchService
from cardhub.services.card_template import CardTemplateService
from cardhub.services.card_token import CardTokenCodec
from cardhub.services.eligibility import EligibilityService
from cardhub.services.member import MemberService, member_brief
from cardhub.uow import get_uow
from fastapi import Depends
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

logger = logging.getLogger(__name__)

CARD_TRANSITIONS: dict[CardStatus, frozenset[CardStatus]] = {
    CardStatus.PENDING: frozenset(
        {
            CardStatus.ACTIVE,
            CardStatus.LOST,
            CardStatus.STOLEN,
            CardStatus.DAMAGED,
            CardStatus.EXPIRED,
        }
    ),
    CardStatus.ACTIVE: frozenset(
        {
            CardStatus.INACTIVE,
            CardStatus.LOST,
            CardStatus.STOLEN,
            CardStatus.DAMAGED,
            CardStatus.EXPIRED,
        }
    ),
    CardStatus.INACTIVE: frozenset({CardStatus.ACTIVE, CardStatus.EXPIRED}),
    # lost/stolen/damaged cards are superseded by a replacement, never revived
    CardStatus.LOST: frozenset({CardStatus.EXPIRED}),
    CardStatus.STOLEN: frozenset({CardStatus.EXPIRED}),
    CardStatus.DAMAGED: frozenset({CardStatus.EXPIRED}),
    CardStatus.EXPIRED: frozenset(),
}

REPLACEMENT_STATUSES = frozenset(
    {CardStatus.LOST, CardStatus.STOLEN, CardStatus.DAMAGED}
)

# lost/stolen/damaged cards keep their marker past expires_at
SWEEPABLE_STATUSES = frozenset(
    {CardStatus.PENDING, CardStatus.ACTIVE, CardStatus.INACTIVE}
)

DEFAULT_REASONS = {
    CardStatus.INACTIVE: "Deactivated by request",
    CardStatus.EXPIRED: "Card expired",
    CardStatus.LOST: "Card reported lost",
    CardStatus.STOLEN: "Card reported stolen",
    CardStatus.DAMAGED: "Card damaged",
}


class MemberCardService(BaseService[MemberCard]):
    model = MemberCard

    def __init__(
        self,
        db: Session = Depends(get_uow),
        config: Config = Depends(get_config),
        member_service: MemberService = Depends(),
        eligibility_service: EligibilityService = Depends(),
        card_template_service: CardTemplateService = Depends(),
        card_token_codec: CardTokenCodec = Depends(),
        card_production_batch_service: CardProductionBatchService = Depends(),
    ):
        self.db = db
        self.config = config
        self._member_service = member_service
        self._eligibility_service = eligibility_service
        self._card_template_service = card_template_service
        self._card_token_codec = card_token_codec
        self._card_production_batch_service = card_production_batch_service

    # --- issuance ---------------------------------------------------------

    def generate(self, request: CardGenerateSchema) -> list[MemberCard]:
        member = self._member_service.get(request.member_id)
        eligibility = self._eligibility_service.check(member)
        if not eligibility.eligible:
            raise IneligibleMember(eligibility.reason)

        template = self._card_template_service.resolve_for_member(
            member, request.template_id, request.company_id
        )

        cards: list[MemberCard] = []
        if request.card_type in (CardTypeRequest.PHYSICAL, CardTypeRequest.BOTH):
            cards.append(
                self._create_physical_card(
                    member,
                    template,
                    expedited=request.expedited_shipping,
                    shipping_address=request.shipping_address,
                )
            )
        if request.card_type in (CardTypeRequest.DIGITAL, CardTypeRequest.BOTH):
            cards.append(self._create_digital_card(member, template))
        return cards

    def _new_card(
        self,
        member: Member,
        template: CardTemplate,
        card_type: CardType,
        card_status: CardStatus,
        **extra,
    ) -> MemberCard:
        now = datetime.datetime.now()
        card = self.model(
            member_id=member.id,
            template_id=template.id,
            card_type=card_type,
            card_status=card_status,
            issued_at=now,
            activated_at=now if card_status == CardStatus.ACTIVE else None,
            expires_at=now + datetime.timedelta(days=self.config.card_validity_days),
            **extra,
        )
        self._card_token_codec.issue(card)
        self.db.add(card)
        self.db.flush()
        logger.info(
            "Issued %s card id=%s for member_id=%s status=%s",
            card_type.value,
            card.id,
            member.id,
            card_status.value,
        )
        return card

    def _create_physical_card(
        self,
        member: Member,
        template: CardTemplate,
        expedited: bool = False,
        shipping_address: str | None = None,
        **extra,
    ) -> MemberCard:
        card = self._new_card(
            member,
            template,
            CardType.PHYSICAL,
            CardStatus.PENDING,
            shipping_address=shipping_address or member.address,
            expedited_shipping=expedited,
            **extra,
        )
        self._card_production_batch_service.assign(card)
        return card

    def _create_digital_card(
        self, member: Member, template: CardTemplate, **extra
    ) -> MemberCard:
        return self._new_card(
            member, template, CardType.DIGITAL, CardStatus.ACTIVE, **extra
        )

    # --- status state machine ---------------------------------------------

    def _transition(
        self,
        card: MemberCard,
        new_status: CardStatus,
        reason: str | None = None,
        notes: str | None = None,
    ) -> None:
        """Only place which writes deactivated_at and deactivation_reason."""
        current = card.card_status
        if new_status not in CARD_TRANSITIONS[current]:
            raise InvalidCardTransition(f"{current.value} -> {new_status.value}")

        now = datetime.datetime.now()
        if new_status in DEACTIVATED_STATUSES:
            card.deactivated_at = now
            card.deactivation_reason = reason or DEFAULT_REASONS[new_status]
        else:
            card.deactivated_at = None
            card.deactivation_reason = None
            card.activated_at = now
        if new_status in REPLACEMENT_STATUSES:
            card.replacement_requested = True
            card.replacement_reason = reason or DEFAULT_REASONS[new_status]
        if notes is not None:
            card.status_notes = notes
        card.card_status = new_status
        card.touch(now)
        logger.info(
            "Card id=%s status %s -> %s (%s)",
            card.id,
            current.value,
            new_status.value,
            card.deactivation_reason or "reactivated",
        )

    def update_status(
        self,
        card_id: int,
        status: CardStatus,
        reason: str | None = None,
        notes: str | None = None,
        expected_version: int | None = None,
    ) -> MemberCard:
        card = self.get(card_id)
        if expected_version is not None and card.version != expected_version:
            raise CardVersionConflict(
                f"expected version {expected_version}, current {card.version}"
            )
        self._transition(card, status, reason, notes)
        try:
            self.db.flush()
        except StaleDataError:
            raise CardVersionConflict(f"card id={card_id}")
        self.db.refresh(card)
        return card

    def expire_overdue_cards(self, now: datetime.datetime | None = None) -> int:
        now = now or datetime.datetime.now()
        cards = (
            self.db.query(self.model)
            .filter(
                self.model.expires_at < now,
                self.model.card_status.in_(SWEEPABLE_STATUSES),
            )
            .all()
        )
        for card in cards:
            self._transition(card, CardStatus.EXPIRED, "Card validity period ended")
        self.db.flush()
        return len(cards)

    # --- replacement --------------------------------------------------------

    def request_replacement(
        self, card_id: int, reason: str, expedited: bool = False
    ) -> MemberCard:
        """
        Issue a brand-new card superseding `card_id`.

        The original card keeps its status; callers mark it lost/stolen/damaged
        through `update_status` beforehand. Replacing a still active card is
        allowed (voluntary replacement).
        """
        original = self.get(card_id)
        member = self._member_service.get(original.member_id)
        extra = {"previous_card_id": original.id, "replacement_reason": reason}
        if original.card_type == CardType.PHYSICAL:
            replacement = self._create_physical_card(
                member,
                original.template,
                expedited=expedited,
                shipping_address=original.shipping_address,
                **extra,
            )
        else:
            replacement = self._create_digital_card(member, original.template, **extra)
        logger.info(
            "Card id=%s replaced by card id=%s: %s", original.id, replacement.id, reason
        )
        return replacement

    # --- reads ----------------------------------------------------------------

    def get_by_member(self, member_id: int) -> list[MemberCard]:
        member = self._member_service.get(member_id)
        return (
            self.db.query(self.model)
            .filter(self.model.member_id == member.id)
            .order_by(self.model.id.asc())
            .all()
        )

    def get_active_by_member(self, member_id: int) -> list[MemberCard]:
        return [
            card
            for card in self.get_by_member(member_id)
            if card.card_status == CardStatus.ACTIVE
        ]

    def get_download(self, card_id: int, member: Member) -> dict:
        card = self.get(card_id)
        if card.member_id != member.id:
            raise CardNotOwned(f"card id={card_id}")
        if card.card_type != CardType.DIGITAL:
            raise CardNotDownloadable
        return {
            "card": card,
            "member": member_brief(member),
            "template": card.template,
            "qr_code_data": card.verification_token,
        }

    def get_by_batch(self, batch_id: int) -> list[MemberCard]:
        return self._card_production_batch_service.get_cards(batch_id)
