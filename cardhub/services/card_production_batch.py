"""Production batch service. Queues physical cards for printing and tracks shipping."""

import datetime
import logging
from typing import TYPE_CHECKING

from cardhub.errors.card_production_batch import (
    CardAlreadyInBatch,
    InvalidBatchTransition,
    TrackingNumberRequired,
)
from cardhub.models.card_production_batch import BatchStatus, CardProductionBatch
from cardhub.models.member_card import CardStatus, MemberCard
from cardhub.schemas.card_production_batch import CardProductionBatchFiltersSchema
from cardhub.services.base import BaseService
from cardhub.uow import get_uow
from fastapi import Depends
from sqlalchemy import func, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Query, Session

if TYPE_CHECKING:
    from cardhub.services.member_card import MemberCardService

logger = logging.getLogger(__name__)

BATCH_TRANSITIONS: dict[BatchStatus, frozenset[BatchStatus]] = {
    BatchStatus.PENDING: frozenset({BatchStatus.IN_PRODUCTION, BatchStatus.CANCELLED}),
    BatchStatus.IN_PRODUCTION: frozenset({BatchStatus.SHIPPED, BatchStatus.CANCELLED}),
    BatchStatus.SHIPPED: frozenset({BatchStatus.DELIVERED}),
    BatchStatus.DELIVERED: frozenset(),
    BatchStatus.CANCELLED: frozenset(),
}


class CardProductionBatchService(BaseService[CardProductionBatch]):
    model = CardProductionBatch

    def __init__(
        self,
        db: Session = Depends(get_uow),
        member_card_service: "MemberCardService | None" = None,
    ):
        self.db = db
        self._member_card_service = member_card_service

    def set_member_card_service(self, member_card_service: "MemberCardService"):
        self._member_card_service = member_card_service

    def _apply_filters(  # type: ignore[override]
        self,
        query: Query[CardProductionBatch],
        filters: CardProductionBatchFiltersSchema,
    ) -> Query[CardProductionBatch]:
        if filters.status is not None:
            query = query.filter(self.model.batch_status == filters.status)
        if filters.start_date is not None:
            query = query.filter(self.model.created_at >= filters.start_date)
        if filters.end_date is not None:
            query = query.filter(self.model.created_at <= filters.end_date)
        return query

    def get_cards(self, batch_id: int) -> list[MemberCard]:
        batch = self.get(batch_id)
        return (
            self.db.query(MemberCard)
            .filter(MemberCard.production_batch_id == batch.id)
            .order_by(MemberCard.id.asc())
            .all()
        )

    def _next_batch_number(self) -> str:
        prefix = f"CPB-{datetime.date.today():%Y%m%d}-"
        taken = (
            self.db.query(func.count(self.model.id))
            .filter(self.model.batch_number.like(f"{prefix}%"))
            .scalar()
        )
        return f"{prefix}{taken + 1:03d}"

    def _claim_open_batch(self, batch_type: str) -> CardProductionBatch:
        """Return the batch accepting cards, opening a new one if there is none."""
        batch = (
            self.db.query(self.model)
            .filter(self.model.is_open.is_(True))
            .with_for_update()
            .first()
        )
        if batch is not None:
            return batch

        batch = self.model(
            batch_number=self._next_batch_number(),
            batch_name=f"Card Production - {datetime.date.today().isoformat()}",
            batch_type=batch_type,
            batch_status=BatchStatus.PENDING,
            production_quantity=0,
            is_open=True,
        )
        try:
            with self.db.begin_nested():
                self.db.add(batch)
        except IntegrityError:
            # another transaction opened a batch first, join it
            logger.info("Open production batch was created concurrently, joining it")
            return (
                self.db.query(self.model)
                .filter(self.model.is_open.is_(True))
                .with_for_update()
                .one()
            )
        logger.info("Opened production batch %s", batch.batch_number)
        return batch

    def assign(self, card: MemberCard) -> CardProductionBatch:
        """Queue a flushed physical card into the open batch."""
        batch = self._claim_open_batch(card.card_type.value)
        assigned = self.db.execute(
            update(MemberCard)
            .where(
                MemberCard.id == card.id,
                MemberCard.production_batch_id.is_(None),
            )
            .values(production_batch_id=batch.id)
            .execution_options(synchronize_session=False)
        )
        if assigned.rowcount != 1:
            raise CardAlreadyInBatch(f"card id={card.id}")
        # incremented in SQL so concurrent assignments never lose an update
        self.db.execute(
            update(CardProductionBatch)
            .where(CardProductionBatch.id == batch.id)
            .values(production_quantity=CardProductionBatch.production_quantity + 1)
            .execution_options(synchronize_session=False)
        )
        self.db.refresh(card)
        self.db.refresh(batch)
        logger.info(
            "Card id=%s queued in batch %s (quantity=%s)",
            card.id,
            batch.batch_number,
            batch.production_quantity,
        )
        return batch

    def advance_status(
        self,
        batch_id: int,
        status: BatchStatus,
        tracking_number: str | None = None,
    ) -> CardProductionBatch:
        batch = self.get(batch_id)
        current = batch.batch_status
        if status not in BATCH_TRANSITIONS[current]:
            raise InvalidBatchTransition(f"{current.value} -> {status.value}")
        if tracking_number:
            batch.tracking_number = tracking_number
        if status == BatchStatus.SHIPPED and not batch.tracking_number:
            raise TrackingNumberRequired(f"batch {batch.batch_number}")

        now = datetime.datetime.now()
        batch.batch_status = status
        batch.is_open = None
        batch.touch(now)
        self.db.flush()

        if status == BatchStatus.SHIPPED:
            batch.shipped_at = now
            self._propagate_tracking(batch, now)
        elif status == BatchStatus.DELIVERED:
            batch.delivered_at = now
            self._propagate_tracking(batch, now)
            self._activate_delivered_cards(batch)
        elif status == BatchStatus.CANCELLED:
            self._requeue_cards(batch)

        self.db.flush()
        self.db.refresh(batch)
        logger.info(
            "Batch %s moved %s -> %s", batch.batch_number, current.value, status.value
        )
        return batch

    def _propagate_tracking(self, batch: CardProductionBatch, now: datetime.datetime):
        for card in self.get_cards(batch.id):
            card.tracking_number = batch.tracking_number
            if card.shipped_at is None:
                card.shipped_at = now
            card.touch(now)

    def _activate_delivered_cards(self, batch: CardProductionBatch):
        if self._member_card_service is None:
            raise RuntimeError("member card service is not wired")
        for card in self.get_cards(batch.id):
            if card.card_status == CardStatus.PENDING:
                self._member_card_service.update_status(
                    card.id,
                    CardStatus.ACTIVE,
                    notes=f"Delivered with batch {batch.batch_number}",
                )

    def _requeue_cards(self, batch: CardProductionBatch):
        """Move cards of a cancelled batch back into the open batch."""
        cards = self.get_cards(batch.id)
        for card in cards:
            card.production_batch_id = None
        batch.production_quantity = 0
        self.db.flush()
        for card in cards:
            if card.card_status == CardStatus.PENDING:
                self.assign(card)
