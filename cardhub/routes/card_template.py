"""API routes for CardTemplate manipulation"""

from cardhub.dependencies.services import get_card_template_service
from cardhub.middlewares.token import get_api_token
from cardhub.schemas.base import PaginationSchema, ResponseSchema
from cardhub.schemas.card_template import (
    CardTemplateCreateSchema,
    CardTemplateFiltersSchema,
    CardTemplateSchema,
    CardTemplateUpdateSchema,
)
from cardhub.services.card_template import CardTemplateService
from fastapi import APIRouter, Depends

card_template_router = APIRouter(
    prefix="/templates", tags=["Card templates"], dependencies=[Depends(get_api_token)]
)


@card_template_router.post("", response_model=ResponseSchema[CardTemplateSchema])
def create_card_template(
    template: CardTemplateCreateSchema,
    card_template_service: CardTemplateService = Depends(get_card_template_service),
):
    return {
        "data": card_template_service.create(template),
        "message": "Card template created",
    }


@card_template_router.get(
    "", response_model=ResponseSchema[PaginationSchema[CardTemplateSchema]]
)
def read_card_templates(
    filters: CardTemplateFiltersSchema = Depends(),
    skip: int = 0,
    limit: int = 100,
    card_template_service: CardTemplateService = Depends(get_card_template_service),
):
    return {"data": card_template_service.get_all(filters, skip, limit)}


@card_template_router.get(
    "/{template_id}", response_model=ResponseSchema[CardTemplateSchema]
)
def read_card_template(
    template_id: int,
    card_template_service: CardTemplateService = Depends(get_card_template_service),
):
    return {"data": card_template_service.get(template_id)}


@card_template_router.put(
    "/{template_id}", response_model=ResponseSchema[CardTemplateSchema]
)
def update_card_template(
    template_id: int,
    template_update: CardTemplateUpdateSchema,
    card_template_service: CardTemplateService = Depends(get_card_template_service),
):
    return {
        "data": card_template_service.update(template_id, template_update),
        "message": "Card template updated",
    }


@card_template_router.post(
    "/{template_id}/deactivate", response_model=ResponseSchema[CardTemplateSchema]
)
def deactivate_card_template(
    template_id: int,
    card_template_service: CardTemplateService = Depends(get_card_template_service),
):
    return {
        "data": card_template_service.deactivate(template_id),
        "message": "Card template deactivated",
    }
