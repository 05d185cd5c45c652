"""Request authentication for staff clients and members"""

from cardhub.config import Config, get_config
from cardhub.dependencies.services import get_token_service
from cardhub.errors.token import TokenInvalid, TokenMissing
from cardhub.models.member import Member
from cardhub.services.token import TokenService
from fastapi import Depends, Header


def get_api_token(
    x_token: str | None = Header(
        default=None,
        description="Static API token of a staff or provider client",
    ),
    config: Config = Depends(get_config),
) -> str:
    if not x_token:
        raise TokenMissing
    if x_token not in config.api_tokens:
        raise TokenInvalid
    return x_token


def get_member_from_token(
    x_token: str | None = Header(
        default=None,
        description="Signed member token issued by /tokens/member",
    ),
    token_service: TokenService = Depends(get_token_service),
) -> Member:
    if not x_token:
        raise TokenMissing
    return token_service.get_member_from_token(x_token)
