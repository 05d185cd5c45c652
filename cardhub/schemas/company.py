"""DTO for Company"""

from cardhub.schemas.base import BaseReadSchema, BaseUpdateSchema


class CompanySchema(BaseReadSchema):
    name: str


class CompanyCreateSchema(BaseUpdateSchema):
    name: str
