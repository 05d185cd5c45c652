"""Usage analytics over recorded card verification events."""

import datetime

from cardhub.config import Config, get_config
from cardhub.models.card_verification_event import (
    CardVerificationEvent,
    VerificationResult,
)
from cardhub.schemas.card_analytics import CardUsageStatisticsSchema
from cardhub.uow import get_uow
from fastapi import Depends
from sqlalchemy import func
from sqlalchemy.orm import Session


class CardAnalyticsService:
    def __init__(
        self,
        db: Session = Depends(get_uow),
        config: Config = Depends(get_config),
    ):
        self.db = db
        self.config = config

    def usage_statistics(
        self,
        member_id: int | None = None,
        start_date: datetime.datetime | None = None,
        end_date: datetime.datetime | None = None,
    ) -> CardUsageStatisticsSchema:
        end_date = end_date or datetime.datetime.now()
        start_date = start_date or end_date - datetime.timedelta(
            days=self.config.usage_window_days
        )

        criteria = [
            CardVerificationEvent.created_at >= start_date,
            CardVerificationEvent.created_at <= end_date,
        ]
        if member_id is not None:
            criteria.append(CardVerificationEvent.member_id == member_id)

        by_result = dict(
            self.db.query(
                CardVerificationEvent.verification_result,
                func.count(CardVerificationEvent.id),
            )
            .filter(*criteria)
            .group_by(CardVerificationEvent.verification_result)
            .all()
        )
        by_type = (
            self.db.query(
                CardVerificationEvent.verification_type,
                func.count(CardVerificationEvent.id),
            )
            .filter(*criteria)
            .group_by(CardVerificationEvent.verification_type)
            .all()
        )
        day = func.date(CardVerificationEvent.created_at)
        by_day = (
            self.db.query(day, func.count(CardVerificationEvent.id))
            .filter(*criteria)
            .group_by(day)
            .order_by(day)
            .all()
        )

        successful = by_result.get(VerificationResult.SUCCESS, 0)
        failed = by_result.get(VerificationResult.FAILED, 0)
        total = successful + failed
        return CardUsageStatisticsSchema(
            total_verifications=total,
            successful_verifications=successful,
            failed_verifications=failed,
            success_rate=round(successful / total, 4) if total else 0.0,
            by_type={kind.value: count for kind, count in by_type},
            # sqlite returns the day as text, postgres as a date
            by_day={str(d): count for d, count in by_day},
        )
