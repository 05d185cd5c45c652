"""Service dependency providers."""

from cardhub.config import Config, get_config
from cardhub.uow import get_uow
from fastapi import Depends
from sqlalchemy.orm import Session


class ServiceContainer:
    """Request-scoped service container."""

    def __init__(self, db: Session, config: Config):
        self.db = db
        self.config = config
        self._company_service = None
        self._member_service = None
        self._eligibility_service = None
        self._card_template_service = None
        self._card_token_codec = None
        self._card_production_batch_service = None
        self._member_card_service = None
        self._card_verification_service = None
        self._card_analytics_service = None
        self._token_service = None

    @property
    def company_service(self):
        if self._company_service is None:
            from cardhub.services.company import CompanyService

            self._company_service = CompanyService(db=self.db)
        return self._company_service

    @property
    def member_service(self):
        if self._member_service is None:
            from cardhub.services.member import MemberService

            self._member_service = MemberService(db=self.db)
        return self._member_service

    @property
    def eligibility_service(self):
        if self._eligibility_service is None:
            from cardhub.services.eligibility import EligibilityService

            self._eligibility_service = EligibilityService()
        return self._eligibility_service

    @property
    def card_template_service(self):
        if self._card_template_service is None:
            from cardhub.services.card_template import CardTemplateService

            self._card_template_service = CardTemplateService(
                db=self.db, company_service=self.company_service
            )
        return self._card_template_service

    @property
    def card_token_codec(self):
        if self._card_token_codec is None:
            from cardhub.services.card_token import CardTokenCodec

            self._card_token_codec = CardTokenCodec(db=self.db)
        return self._card_token_codec

    @property
    def card_production_batch_service(self):
        self._ensure_card_batch_services()
        return self._card_production_batch_service

    @property
    def member_card_service(self):
        self._ensure_card_batch_services()
        return self._member_card_service

    def _ensure_card_batch_services(self) -> None:
        if self._card_production_batch_service is None:
            from cardhub.services.card_production_batch import (
                CardProductionBatchService,
            )

            self._card_production_batch_service = CardProductionBatchService(
                db=self.db, member_card_service=None
            )
        if self._member_card_service is None:
            from cardhub.services.member_card import MemberCardService

            self._member_card_service = MemberCardService(
                db=self.db,
                config=self.config,
                member_service=self.member_service,
                eligibility_service=self.eligibility_service,
                card_template_service=self.card_template_service,
                card_token_codec=self.card_token_codec,
                card_production_batch_service=self._card_production_batch_service,
            )
        self._card_production_batch_service.set_member_card_service(
            self._member_card_service
        )

    @property
    def card_verification_service(self):
        if self._card_verification_service is None:
            from cardhub.services.card_verification import CardVerificationService

            self._card_verification_service = CardVerificationService(
                db=self.db,
                card_token_codec=self.card_token_codec,
                member_service=self.member_service,
                eligibility_service=self.eligibility_service,
                member_card_service=self.member_card_service,
            )
        return self._card_verification_service

    @property
    def card_analytics_service(self):
        if self._card_analytics_service is None:
            from cardhub.services.card_analytics import CardAnalyticsService

            self._card_analytics_service = CardAnalyticsService(
                db=self.db, config=self.config
            )
        return self._card_analytics_service

    @property
    def token_service(self):
        if self._token_service is None:
            from cardhub.services.token import TokenService

            self._token_service = TokenService(
                db=self.db,
                member_service=self.member_service,
                config=self.config,
            )
        return self._token_service


def get_container(
    db: Session = Depends(get_uow),
    config: Config = Depends(get_config),
) -> ServiceContainer:
    return ServiceContainer(db, config)


def get_company_service(container: ServiceContainer = Depends(get_container)):
    return container.company_service


def get_member_service(container: ServiceContainer = Depends(get_container)):
    return container.member_service


def get_card_template_service(container: ServiceContainer = Depends(get_container)):
    return container.card_template_service


def get_card_production_batch_service(
    container: ServiceContainer = Depends(get_container),
):
    return container.card_production_batch_service


def get_member_card_service(container: ServiceContainer = Depends(get_container)):
    return container.member_card_service


def get_card_verification_service(
    container: ServiceContainer = Depends(get_container),
):
    return container.card_verification_service


def get_card_analytics_service(container: ServiceContainer = Depends(get_container)):
    return container.card_analytics_service


def get_token_service(container: ServiceContainer = Depends(get_container)):
    return container.token_service
