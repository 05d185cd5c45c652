"""Card template service. Stores company card designs and picks the default one."""

import logging

from cardhub.errors.common import NotFoundError
from cardhub.errors.member import CompanyRequired
from cardhub.models.card_template import CardTemplate, CardTemplateType
from cardhub.models.member import Member
from cardhub.schemas.card_template import CardTemplateFiltersSchema
from cardhub.services.base import BaseService
from cardhub.services.company import CompanyService
from cardhub.uow import get_uow
from fastapi import Depends
from sqlalchemy.orm import Query, Session

logger = logging.getLogger(__name__)

DEFAULT_TEMPLATE_DESIGN = {
    "background_color": "#1e40af",
    "foreground_color": "#ffffff",
    "accent_color": "#f59e0b",
    "font_family": "Arial",
}


class CardTemplateService(BaseService[CardTemplate]):
    model = CardTemplate

    def __init__(
        self,
        db: Session = Depends(get_uow),
        company_service: CompanyService = Depends(),
    ):
        self.db = db
        self._company_service = company_service

    def _apply_filters(  # type: ignore[override]
        self, query: Query[CardTemplate], filters: CardTemplateFiltersSchema
    ) -> Query[CardTemplate]:
        if filters.company_id is not None:
            query = query.filter(self.model.company_id == filters.company_id)
        if filters.template_type is not None:
            query = query.filter(self.model.template_type == filters.template_type)
        if filters.active is not None:
            query = query.filter(self.model.is_active == filters.active)
        return query

    def deactivate(self, template_id: int) -> CardTemplate:
        template = self.get(template_id)
        template.is_active = False
        template.touch()
        self.db.flush()
        return template

    def get_or_create_default(self, company_id: int) -> CardTemplate:
        """
        Return the company's canonical standard template, creating it if absent.

        Concurrent first calls may both create a template; the earliest one by
        (created_at, id) wins on every later read.
        """
        template = (
            self.db.query(self.model)
            .filter(
                self.model.company_id == company_id,
                self.model.is_active.is_(True),
                self.model.template_type == CardTemplateType.STANDARD,
            )
            .order_by(self.model.created_at.asc(), self.model.id.asc())
            .first()
        )
        if template is not None:
            return template

        company = self._company_service.get(company_id)
        template = self.model(
            company_id=company.id,
            template_name=f"{company.name} Standard Card",
            template_type=CardTemplateType.STANDARD,
            is_active=True,
            **DEFAULT_TEMPLATE_DESIGN,
        )
        self.db.add(template)
        self.db.flush()
        logger.info(
            "Created default card template id=%s for company_id=%s",
            template.id,
            company_id,
        )
        return template

    def resolve_for_member(
        self,
        member: Member,
        template_id: int | None = None,
        company_id: int | None = None,
    ) -> CardTemplate:
        if template_id is not None:
            try:
                return self.get(template_id)
            except NotFoundError:
                raise NotFoundError(f"specified card template id={template_id}")
        target_company_id = company_id or member.company_id
        if target_company_id is None:
            raise CompanyRequired(f"member id={member.id} has no company")
        return self.get_or_create_default(target_company_id)
