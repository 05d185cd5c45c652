"""Token service. Issues and verifies signed member tokens."""

import logging
import time
from datetime import timedelta

import jwt
from cardhub.config import Config, get_config
from cardhub.errors.token import TokenInvalid
from cardhub.models.member import Member
from cardhub.services.member import MemberService
from cardhub.uow import get_uow
from fastapi import Depends
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)


class TokenService:
    ALGORITHM = "HS256"

    @staticmethod
    def decode_member_id_from_token(token: str, secret_key: str) -> int:
        """Decode member id from token without DB lookup."""
        try:
            payload = jwt.decode(token, secret_key, algorithms=[TokenService.ALGORITHM])
            return int(payload.get("sub") or 0)
        except (jwt.PyJWTError, ValueError):
            raise TokenInvalid

    def __init__(
        self,
        db: Session = Depends(get_uow),
        member_service: MemberService = Depends(),
        config: Config = Depends(get_config),
    ):
        self.db = db
        self.member_service = member_service
        self.config = config

    def generate_member_token(self, member_id: int) -> str:
        """Generate a new signed token with member_id and current timestamp."""
        member = self.member_service.get(member_id)
        data = {
            "sub": str(member.id),
            "iat": int(time.time()),
            "exp": int(
                time.time()
                + timedelta(days=self.config.member_token_ttl_days).total_seconds()
            ),
        }
        logger.info("TokenService: token generated for member_id=%s", member.id)
        return jwt.encode(data, self.config.secret_key, algorithm=self.ALGORITHM)

    def get_member_from_token(self, token: str) -> Member:
        """Verify the token, decode the member id, then load the member."""
        member_id = TokenService.decode_member_id_from_token(
            token, self.config.secret_key or ""
        )
        member = self.member_service.find(member_id)
        if member is None:
            raise TokenInvalid
        return member
