"""
Error taxonomy shared by services and routers.

Every error carries the HTTP status it is rendered with and a client-facing
message. Routers never build error responses themselves; the handlers
registered in ``api.main`` turn any ``ApiError`` into ``{"message": ...}``.
"""


class ApiError(Exception):
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class Unauthenticated(ApiError):
    status_code = 401
    default_message = "Unauthorized access"


class InvalidCredential(ApiError):
    status_code = 403
    default_message = "Forbidden access"


class Forbidden(ApiError):
    status_code = 403
    default_message = "Forbidden access"


class NotFound(ApiError):
    status_code = 404
    default_message = "Resource not found"


class Conflict(ApiError):
    status_code = 409
    default_message = "Resource already exists"


class InvalidInput(ApiError):
    status_code = 400
    default_message = "Invalid request"


class AlreadyConfirmedOrMissing(ApiError):
    status_code = 400
    default_message = "No pending donation found or already confirmed."


class UpstreamFailure(ApiError):
    status_code = 500
    default_message = "Upstream service failure"
