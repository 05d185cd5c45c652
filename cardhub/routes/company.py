"""API routes for Company manipulation"""

from cardhub.dependencies.services import get_company_service
from cardhub.middlewares.token import get_api_token
from cardhub.schemas.base import ResponseSchema
from cardhub.schemas.company import CompanyCreateSchema, CompanySchema
from cardhub.services.company import CompanyService
from fastapi import APIRouter, Depends

company_router = APIRouter(
    prefix="/companies", tags=["Companies"], dependencies=[Depends(get_api_token)]
)


@company_router.post("", response_model=ResponseSchema[CompanySchema])
def create_company(
    company: CompanyCreateSchema,
    company_service: CompanyService = Depends(get_company_service),
):
    return {"data": company_service.create(company), "message": "Company created"}


@company_router.get("/{company_id}", response_model=ResponseSchema[CompanySchema])
def read_company(
    company_id: int,
    company_service: CompanyService = Depends(get_company_service),
):
    return {"data": company_service.get(company_id)}
