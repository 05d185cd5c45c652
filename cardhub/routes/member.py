"""API routes for Member manipulation"""

from cardhub.dependencies.services import get_member_service
from cardhub.middlewares.token import get_api_token
from cardhub.schemas.base import PaginationSchema, ResponseSchema
from cardhub.schemas.member import (
    MemberCreateSchema,
    MemberFiltersSchema,
    MemberSchema,
    MemberUpdateSchema,
)
from cardhub.services.member import MemberService
from fastapi import APIRouter, Depends

member_router = APIRouter(
    prefix="/members", tags=["Members"], dependencies=[Depends(get_api_token)]
)


@member_router.post("", response_model=ResponseSchema[MemberSchema])
def create_member(
    member: MemberCreateSchema,
    member_service: MemberService = Depends(get_member_service),
):
    return {"data": member_service.create(member), "message": "Member created"}


@member_router.get("/{member_id}", response_model=ResponseSchema[MemberSchema])
def read_member(
    member_id: int,
    member_service: MemberService = Depends(get_member_service),
):
    return {"data": member_service.get(member_id)}


@member_router.get("", response_model=ResponseSchema[PaginationSchema[MemberSchema]])
def read_members(
    filters: MemberFiltersSchema = Depends(),
    skip: int = 0,
    limit: int = 100,
    member_service: MemberService = Depends(get_member_service),
):
    return {"data": member_service.get_all(filters, skip, limit)}


@member_router.patch("/{member_id}", response_model=ResponseSchema[MemberSchema])
def update_member(
    member_id: int,
    member_update: MemberUpdateSchema,
    member_service: MemberService = Depends(get_member_service),
):
    return {
        "data": member_service.update(member_id, member_update),
        "message": "Member updated",
    }
