"""API routes for Token issuance"""

from cardhub.dependencies.services import get_token_service
from cardhub.middlewares.token import get_api_token
from cardhub.schemas.base import ResponseSchema
from cardhub.schemas.token import MemberTokenRequestSchema, TokenResponseSchema
from cardhub.services.token import TokenService
from fastapi import APIRouter, Depends

token_router = APIRouter(prefix="/tokens", tags=["Tokens"])


@token_router.post("/member", response_model=ResponseSchema[TokenResponseSchema])
def issue_member_token(
    token_request: MemberTokenRequestSchema,
    token_service: TokenService = Depends(get_token_service),
    api_token: str = Depends(get_api_token),
):
    token = token_service.generate_member_token(token_request.member_id)
    return {"data": {"token": token}}
