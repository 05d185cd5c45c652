"""DTO for CardProductionBatch"""

from datetime import datetime

from cardhub.models.card_production_batch import BatchStatus
from cardhub.schemas.base import BaseFilterSchema, BaseReadSchema, BaseSchema


class CardProductionBatchSchema(BaseReadSchema):
    batch_number: str
    batch_name: str
    batch_type: str
    batch_status: BatchStatus
    production_quantity: int
    tracking_number: str | None = None
    shipped_at: datetime | None = None
    delivered_at: datetime | None = None


class BatchStatusUpdateSchema(BaseSchema):
    status: BatchStatus
    tracking_number: str | None = None


class CardProductionBatchFiltersSchema(BaseFilterSchema):
    status: BatchStatus | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
