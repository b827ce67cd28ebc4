"""Error taxonomy shared by the store, the read model and the services"""


class ServiceError(Exception):
    """Base error carrying a stable code and an HTTP status category"""
    status_code = 500
    default_code = "INTERNAL_ERROR"

    def __init__(self, message: str, code: str = None):
        self.message = message
        self.code = code or self.default_code
        super().__init__(message)


class InvalidIdentifier(ServiceError):
    """Malformed id, rejected before any store access"""
    status_code = 400
    default_code = "INVALID_IDENTIFIER"


class ValidationFailed(ServiceError):
    """Missing or malformed required fields"""
    status_code = 422
    default_code = "VALIDATION_FAILED"


class NotFound(ServiceError):
    status_code = 404
    default_code = "NOT_FOUND"


class Forbidden(ServiceError):
    """Entity exists but the caller does not own it"""
    status_code = 403
    default_code = "FORBIDDEN"


class Conflict(ServiceError):
    """Uniqueness violation"""
    status_code = 409
    default_code = "CONFLICT"


class DataAccessFailure(ServiceError):
    """Store call failed or returned an unexpected shape"""
    status_code = 503
    default_code = "DATA_ACCESS_FAILURE"


class Unauthenticated(ServiceError):
    """Operation needs a caller identity and none was supplied"""
    status_code = 401
    default_code = "UNAUTHENTICATED"
