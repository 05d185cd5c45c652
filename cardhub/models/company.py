"""Company model. Employer group whose members receive cards."""

from cardhub.models.base import BaseModel
from sqlalchemy.orm import Mapped, mapped_column


class Company(BaseModel):
    __tablename__ = "companies"

    name: Mapped[str] = mapped_column(unique=True)
