"""Card template model. Visual blueprint a company's cards are stamped from."""

import enum

from cardhub.models.base import BaseModel
from sqlalchemy import Enum, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column


class CardTemplateType(enum.Enum):
    STANDARD = "standard"
    PREMIUM = "premium"
    CORPORATE = "corporate"
    FAMILY = "family"
    INDIVIDUAL = "individual"


class CardTemplate(BaseModel):
    __tablename__ = "card_templates"

    company_id: Mapped[int | None] = mapped_column(
        ForeignKey("companies.id"), nullable=True, index=True
    )
    template_name: Mapped[str]
    template_type: Mapped[CardTemplateType] = mapped_column(
        Enum(
            CardTemplateType,
            values_callable=lambda enum_cls: [e.value for e in enum_cls],
            name="card_template_type",
        ),
        nullable=False,
        default=CardTemplateType.STANDARD,
    )
    background_color: Mapped[str] = mapped_column(default="#ffffff")
    foreground_color: Mapped[str] = mapped_column(default="#000000")
    accent_color: Mapped[str] = mapped_column(default="#1976d2")
    font_family: Mapped[str] = mapped_column(default="Arial")
    logo_url: Mapped[str | None] = mapped_column(nullable=True)
    is_active: Mapped[bool] = mapped_column(default=True)
