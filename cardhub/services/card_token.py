"""Verification token codec. Issues opaque QR payloads and resolves them to cards."""

import logging
import re
import secrets

from cardhub.errors.card import CardTokenCollision
from cardhub.models.member_card import MemberCard
from cardhub.uow import get_uow
from fastapi import Depends
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)


class CardTokenCodec:
    """
    Tokens are `cct_` followed by 32 random bytes in urlsafe base64, so they
    carry no information about card or member ids.
    """

    PREFIX = "cct_"
    ENTROPY_BYTES = 32
    MAX_ATTEMPTS = 5

    # token_urlsafe(32) always yields 43 characters
    _TOKEN_RE = re.compile(r"^cct_[A-Za-z0-9_-]{43}$")

    def __init__(self, db: Session = Depends(get_uow)):
        self.db = db

    def _generate(self) -> str:
        return self.PREFIX + secrets.token_urlsafe(self.ENTROPY_BYTES)

    def _exists(self, token: str) -> bool:
        return (
            self.db.query(MemberCard.id)
            .filter(MemberCard.verification_token == token)
            .first()
            is not None
        )

    def is_well_formed(self, token: object) -> bool:
        return isinstance(token, str) and bool(self._TOKEN_RE.match(token))

    def issue(self, card: MemberCard) -> str:
        """Generate a token never used before and store it on the card."""
        for _ in range(self.MAX_ATTEMPTS):
            token = self._generate()
            if not self._exists(token):
                card.verification_token = token
                return token
            logger.error("Verification token collision, regenerating")
        raise CardTokenCollision

    def resolve(self, token: object) -> MemberCard | None:
        """Pure lookup. Malformed input is reported as not found."""
        if not self.is_well_formed(token):
            return None
        return (
            self.db.query(MemberCard)
            .filter(MemberCard.verification_token == token)
            .first()
        )
