"""Verification engine. Point-of-care check of a presented card token."""

import datetime
import logging

from cardhub.models.card_verification_event import (
    CardVerificationEvent,
    VerificationResult,
    VerificationType,
)
from cardhub.models.member import Member
from cardhub.models.member_card import CardStatus, MemberCard
from cardhub.schemas.base import PaginationSchema
from cardhub.schemas.card_verification import (
    CardVerificationEventFiltersSchema,
    CardVerificationResultSchema,
    OperatorAction,
    VerificationFailure,
)
from cardhub.schemas.member_card import MemberCardSchema
from cardhub.services.base import BaseService
from cardhub.services.card_token import CardTokenCodec
from cardhub.services.eligibility import EligibilityService
from cardhub.services.member import MemberService, member_brief
from cardhub.services.member_card import MemberCardService
from cardhub.uow import get_uow
from fastapi import Depends
from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session

logger = logging.getLogger(__name__)

# card statuses which can never pass verification, with the operator guidance
STATUS_FAILURES: dict[CardStatus, tuple[VerificationFailure, str, OperatorAction]] = {
    CardStatus.PENDING: (
        VerificationFailure.CARD_PENDING,
        "Card has not been activated yet",
        OperatorAction.DENY,
    ),
    CardStatus.INACTIVE: (
        VerificationFailure.CARD_INACTIVE,
        "Card is inactive",
        OperatorAction.DENY,
    ),
    CardStatus.LOST: (
        VerificationFailure.CARD_LOST,
        "Card has been reported lost",
        OperatorAction.ESCALATE,
    ),
    CardStatus.STOLEN: (
        VerificationFailure.CARD_STOLEN,
        "Card has been reported stolen",
        OperatorAction.ESCALATE,
    ),
    CardStatus.DAMAGED: (
        VerificationFailure.CARD_DAMAGED,
        "Card has been reported damaged",
        OperatorAction.DENY,
    ),
    CardStatus.EXPIRED: (
        VerificationFailure.CARD_EXPIRED,
        "Card has expired",
        OperatorAction.DENY,
    ),
}


class CardVerificationService(BaseService[CardVerificationEvent]):
    model = CardVerificationEvent

    def __init__(
        self,
        db: Session = Depends(get_uow),
        card_token_codec: CardTokenCodec = Depends(),
        member_service: MemberService = Depends(),
        eligibility_service: EligibilityService = Depends(),
        member_card_service: MemberCardService = Depends(),
    ):
        self.db = db
        self._card_token_codec = card_token_codec
        self._member_service = member_service
        self._eligibility_service = eligibility_service
        self._member_card_service = member_card_service

    def _apply_filters(  # type: ignore[override]
        self,
        query: Query[CardVerificationEvent],
        filters: CardVerificationEventFiltersSchema,
    ) -> Query[CardVerificationEvent]:
        if filters.card_id is not None:
            query = query.filter(self.model.card_id == filters.card_id)
        if filters.member_id is not None:
            query = query.filter(self.model.member_id == filters.member_id)
        if filters.verification_result is not None:
            query = query.filter(
                self.model.verification_result == filters.verification_result
            )
        if filters.verification_type is not None:
            query = query.filter(
                self.model.verification_type == filters.verification_type
            )
        if filters.start_date is not None:
            query = query.filter(self.model.created_at >= filters.start_date)
        if filters.end_date is not None:
            query = query.filter(self.model.created_at <= filters.end_date)
        return query

    def get_by_card(
        self, card_id: int, skip=0, limit=100
    ) -> PaginationSchema[CardVerificationEvent]:
        card = self._member_card_service.get(card_id)
        return self.get_all(
            CardVerificationEventFiltersSchema(card_id=card.id), skip, limit
        )

    def _record(
        self,
        card: MemberCard | None,
        result: VerificationResult,
        verified_by: str,
        verification_type: VerificationType,
        location: str | None,
        device_info: str | None,
        reason: str | None = None,
    ) -> CardVerificationEvent:
        event = self.model(
            card_id=card.id if card is not None else None,
            member_id=card.member_id if card is not None else None,
            verified_by=verified_by,
            verification_type=verification_type,
            verification_result=result,
            location=location,
            device_info=device_info,
            reason=reason,
        )
        self.db.add(event)
        return event

    def _fail(
        self,
        card: MemberCard | None,
        failure: VerificationFailure,
        reason: str,
        action: OperatorAction,
        event: CardVerificationEvent | None,
        member: Member | None = None,
    ) -> CardVerificationResultSchema:
        logger.info(
            "Verification failed: card_id=%s failure=%s reason=%s",
            card.id if card is not None else None,
            failure.value,
            reason,
        )
        return CardVerificationResultSchema(
            valid=False,
            card=MemberCardSchema.model_validate(card) if card is not None else None,
            member=member_brief(member) if member is not None else None,
            reason=reason,
            failure_code=failure,
            action=action,
            verification_event_id=event.id if event is not None else None,
        )

    def _flush_or_rollback(self) -> bool:
        try:
            self.db.flush()
        except SQLAlchemyError:
            logger.exception("Could not record card verification")
            self.db.rollback()
            return False
        return True

    def _internal_error(self) -> CardVerificationResultSchema:
        return CardVerificationResultSchema(
            valid=False,
            reason="Verification could not be recorded",
            failure_code=VerificationFailure.INTERNAL_ERROR,
            action=OperatorAction.RETRY,
        )

    def verify(
        self,
        token: str,
        verified_by: str,
        verification_type: VerificationType,
        location: str | None = None,
        device_info: str | None = None,
    ) -> CardVerificationResultSchema:
        """
        Resolve the token once and evaluate that card and its member.

        Expected negative outcomes (unknown token, blocked card, lapsed
        coverage) are returned as `valid=False` results and recorded as
        failed events. The card is never re-resolved after the checks so the
        recorded event matches the evaluated state.
        """
        audit = dict(
            verified_by=verified_by,
            verification_type=verification_type,
            location=location,
            device_info=device_info,
        )

        card = self._card_token_codec.resolve(token)
        if card is None:
            event = self._record(
                None, VerificationResult.FAILED, reason="Card not found", **audit
            )
            if not self._flush_or_rollback():
                return self._internal_error()
            return self._fail(
                None,
                VerificationFailure.NOT_FOUND,
                "Card not found",
                OperatorAction.RETRY,
                event,
            )

        if card.card_status != CardStatus.ACTIVE:
            failure, reason, action = STATUS_FAILURES[card.card_status]
            event = self._record(
                card, VerificationResult.FAILED, reason=reason, **audit
            )
            if not self._flush_or_rollback():
                return self._internal_error()
            return self._fail(card, failure, reason, action, event)

        member = self._member_service.find(card.member_id)
        if member is None:
            logger.error(
                "Card id=%s references missing member_id=%s",
                card.id,
                card.member_id,
            )
            return self._fail(
                card,
                VerificationFailure.MEMBER_NOT_FOUND,
                "Member not found",
                OperatorAction.ESCALATE,
                None,
            )

        eligibility = self._eligibility_service.check(member)
        if not eligibility.eligible:
            reason = eligibility.reason or "Member is not eligible"
            event = self._record(
                card, VerificationResult.FAILED, reason=reason, **audit
            )
            if not self._flush_or_rollback():
                return self._internal_error()
            return self._fail(
                card,
                VerificationFailure.MEMBER_INELIGIBLE,
                reason,
                OperatorAction.DENY,
                event,
                member,
            )

        now = datetime.datetime.now()
        if card.expires_at <= now:
            failure, reason, action = STATUS_FAILURES[CardStatus.EXPIRED]
            event = self._record(
                card, VerificationResult.FAILED, reason=reason, **audit
            )
            if not self._flush_or_rollback():
                return self._internal_error()
            return self._fail(card, failure, reason, action, event, member)

        # event and last_used_at are written together or not at all; the usage
        # stamp does not bump the card version
        event = self._record(card, VerificationResult.SUCCESS, **audit)
        try:
            self.db.execute(
                update(MemberCard)
                .where(MemberCard.id == card.id)
                .values(last_used_at=now)
            )
            self.db.flush()
        except SQLAlchemyError:
            logger.exception("Could not record successful card verification")
            self.db.rollback()
            return self._internal_error()

        logger.info(
            "Verification succeeded: card_id=%s member_id=%s by=%s",
            card.id,
            member.id,
            verified_by,
        )
        return CardVerificationResultSchema(
            valid=True,
            card=MemberCardSchema.model_validate(card),
            member=member_brief(member),
            verification_event_id=event.id,
        )
