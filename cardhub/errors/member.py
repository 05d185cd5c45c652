"""Member and eligibility errors"""

from cardhub.errors.base import ApplicationError


class IneligibleMember(ApplicationError):
    http_code = 422
    error_code = 4001
    error = "Member is not eligible for card issuance"


class CompanyRequired(ApplicationError):
    http_code = 400
    error_code = 4002
    error = "Company ID required for template selection"


class MemberAccessDenied(ApplicationError):
    http_code = 403
    error_code = 4003
    error = "Members may only access their own cards"
