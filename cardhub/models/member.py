"""Member model. Insured person who owns cards."""

import enum
from datetime import date

from cardhub.models.base import BaseModel
from cardhub.models.company import Company
from sqlalchemy import Date, Enum, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship


class MemberType(enum.Enum):
    EMPLOYEE = "employee"
    SPOUSE = "spouse"
    DEPENDENT = "dependent"


class MemberStatus(enum.Enum):
    ACTIVE = "active"
    SUSPENDED = "suspended"
    TERMINATED = "terminated"


class Member(BaseModel):
    __tablename__ = "members"

    first_name: Mapped[str]
    last_name: Mapped[str]
    member_type: Mapped[MemberType] = mapped_column(
        Enum(
            MemberType,
            values_callable=lambda enum_cls: [e.value for e in enum_cls],
            name="member_type",
        ),
        nullable=False,
        default=MemberType.EMPLOYEE,
    )
    date_of_birth: Mapped[date] = mapped_column(Date, nullable=False)

    company_id: Mapped[int | None] = mapped_column(
        ForeignKey("companies.id"), nullable=True
    )
    company: Mapped[Company | None] = relationship()

    status: Mapped[MemberStatus] = mapped_column(
        Enum(
            MemberStatus,
            values_callable=lambda enum_cls: [e.value for e in enum_cls],
            name="member_status",
        ),
        nullable=False,
        default=MemberStatus.ACTIVE,
    )
    coverage_start: Mapped[date | None] = mapped_column(Date, nullable=True)
    coverage_end: Mapped[date | None] = mapped_column(Date, nullable=True)

    # postal address, used as default shipping address of physical cards
    address: Mapped[str | None] = mapped_column(nullable=True)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"
