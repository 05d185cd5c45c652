"""DTO for Token"""

from cardhub.schemas.base import BaseSchema


class MemberTokenRequestSchema(BaseSchema):
    member_id: int


class TokenResponseSchema(BaseSchema):
    token: str
