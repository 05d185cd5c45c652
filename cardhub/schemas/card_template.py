"""DTO for CardTemplate"""

from cardhub.models.card_template import CardTemplateType
from cardhub.schemas.base import BaseFilterSchema, BaseReadSchema, BaseUpdateSchema


class CardTemplateSchema(BaseReadSchema):
    company_id: int | None = None
    template_name: str
    template_type: CardTemplateType
    background_color: str
    foreground_color: str
    accent_color: str
    font_family: str
    logo_url: str | None = None
    is_active: bool


class CardTemplateCreateSchema(BaseUpdateSchema):
    company_id: int | None = None
    template_name: str
    template_type: CardTemplateType = CardTemplateType.STANDARD
    background_color: str | None = None
    foreground_color: str | None = None
    accent_color: str | None = None
    font_family: str | None = None
    logo_url: str | None = None
    is_active: bool = True


class CardTemplateUpdateSchema(BaseUpdateSchema):
    template_name: str | None = None
    template_type: CardTemplateType | None = None
    background_color: str | None = None
    foreground_color: str | None = None
    accent_color: str | None = None
    font_family: str | None = None
    logo_url: str | None = None
    is_active: bool | None = None


class CardTemplateFiltersSchema(BaseFilterSchema):
    company_id: int | None = None
    template_type: CardTemplateType | None = None
    active: bool | None = None
