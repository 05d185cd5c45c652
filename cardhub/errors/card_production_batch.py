"""Production batch usage errors"""

from cardhub.errors.base import ApplicationError


class InvalidBatchTransition(ApplicationError):
    http_code = 409
    error_code = 6001
    error = "Batch status transition is not allowed"


class CardAlreadyInBatch(ApplicationError):
    http_code = 409
    error_code = 6002
    error = "Card is already assigned to a production batch"


class TrackingNumberRequired(ApplicationError):
    http_code = 400
    error_code = 6003
    error = "Tracking number is required to ship a batch"
