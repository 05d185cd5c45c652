"""Company service"""

from cardhub.models.company import Company
from cardhub.services.base import BaseService


class CompanyService(BaseService[Company]):
    model = Company
