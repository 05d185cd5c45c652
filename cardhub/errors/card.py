"""Member card usage errors"""

from cardhub.errors.base import ApplicationError


class InvalidCardTransition(ApplicationError):
    http_code = 409
    error_code = 5001
    error = "Card status transition is not allowed"


class CardVersionConflict(ApplicationError):
    http_code = 409
    error_code = 5002
    error = "Card was modified concurrently, re-read and retry"


class CardNotDownloadable(ApplicationError):
    http_code = 400
    error_code = 5003
    error = "Only digital cards can be downloaded"


class CardNotOwned(ApplicationError):
    http_code = 403
    error_code = 5004
    error = "Card belongs to another member"


class CardTokenCollision(ApplicationError):
    http_code = 500
    error_code = 5005
    error = "Could not issue a unique verification token"
