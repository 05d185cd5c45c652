"""API routes for CardProductionBatch management"""

from cardhub.dependencies.services import get_card_production_batch_service
from cardhub.middlewares.token import get_api_token
from cardhub.schemas.base import PaginationSchema, ResponseSchema
from cardhub.schemas.card_production_batch import (
    BatchStatusUpdateSchema,
    CardProductionBatchFiltersSchema,
    CardProductionBatchSchema,
)
from cardhub.schemas.member_card import MemberCardSchema
from cardhub.services.card_production_batch import CardProductionBatchService
from fastapi import APIRouter, Depends

card_production_batch_router = APIRouter(
    prefix="/batches",
    tags=["Card production batches"],
    dependencies=[Depends(get_api_token)],
)


@card_production_batch_router.get(
    "", response_model=ResponseSchema[PaginationSchema[CardProductionBatchSchema]]
)
def read_batches(
    filters: CardProductionBatchFiltersSchema = Depends(),
    skip: int = 0,
    limit: int = 100,
    batch_service: CardProductionBatchService = Depends(
        get_card_production_batch_service
    ),
):
    return {"data": batch_service.get_all(filters, skip, limit)}


@card_production_batch_router.get(
    "/{batch_id}", response_model=ResponseSchema[CardProductionBatchSchema]
)
def read_batch(
    batch_id: int,
    batch_service: CardProductionBatchService = Depends(
        get_card_production_batch_service
    ),
):
    return {"data": batch_service.get(batch_id)}


@card_production_batch_router.get(
    "/{batch_id}/cards", response_model=ResponseSchema[list[MemberCardSchema]]
)
def read_batch_cards(
    batch_id: int,
    batch_service: CardProductionBatchService = Depends(
        get_card_production_batch_service
    ),
):
    return {"data": batch_service.get_cards(batch_id)}


@card_production_batch_router.put(
    "/{batch_id}/status", response_model=ResponseSchema[CardProductionBatchSchema]
)
def update_batch_status(
    batch_id: int,
    status_update: BatchStatusUpdateSchema,
    batch_service: CardProductionBatchService = Depends(
        get_card_production_batch_service
    ),
):
    batch = batch_service.advance_status(
        batch_id, status_update.status, status_update.tracking_number
    )
    return {"data": batch, "message": f"Batch moved to {batch.batch_status.value}"}
