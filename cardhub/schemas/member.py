"""DTO for Member"""

from datetime import date

from cardhub.models.member import MemberStatus, MemberType
from cardhub.schemas.base import (
    BaseFilterSchema,
    BaseReadSchema,
    BaseSchema,
    BaseUpdateSchema,
)
from pydantic import model_validator


class MemberSchema(BaseReadSchema):
    first_name: str
    last_name: str
    member_type: MemberType
    date_of_birth: date
    company_id: int | None = None
    status: MemberStatus
    coverage_start: date | None = None
    coverage_end: date | None = None
    address: str | None = None


class MemberCreateSchema(BaseUpdateSchema):
    first_name: str
    last_name: str
    member_type: MemberType = MemberType.EMPLOYEE
    date_of_birth: date
    company_id: int | None = None
    status: MemberStatus = MemberStatus.ACTIVE
    coverage_start: date | None = None
    coverage_end: date | None = None
    address: str | None = None

    @model_validator(mode="after")
    def coverage_window_must_be_ordered(self) -> "MemberCreateSchema":
        if (
            self.coverage_start is not None
            and self.coverage_end is not None
            and self.coverage_end < self.coverage_start
        ):
            raise ValueError("coverage_end must not be before coverage_start")
        return self


class MemberUpdateSchema(BaseUpdateSchema):
    first_name: str | None = None
    last_name: str | None = None
    member_type: MemberType | None = None
    company_id: int | None = None
    status: MemberStatus | None = None
    coverage_start: date | None = None
    coverage_end: date | None = None
    address: str | None = None


class MemberFiltersSchema(BaseFilterSchema):
    name: str | None = None
    company_id: int | None = None
    status: MemberStatus | None = None


class MemberBriefSchema(BaseSchema):
    """Minimal member projection exposed at the point of verification."""

    id: int
    name: str
    member_type: MemberType
    date_of_birth: date
