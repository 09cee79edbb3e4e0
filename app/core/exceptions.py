from typing import Optional, Any

class BillingError(Exception):
    """
    Base exception for the billing application.
    """
    def __init__(self, message: str, code: str = "INTERNAL_ERROR", status_code: int = 500, details: Optional[Any] = None):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)

class ValidationError(BillingError):
    """
    Raised when input validation fails.
    """
    def __init__(self, message: str = "Validation error", details: Optional[Any] = None):
        super().__init__(message, code="VALIDATION_ERROR", status_code=400, details=details)

class InvalidStateError(BillingError):
    """
    Raised when a well-formed request cannot be applied to the current data.
    """
    def __init__(self, message: str = "Invalid state", details: Optional[Any] = None):
        super().__init__(message, code="INVALID_STATE", status_code=400, details=details)

class AuthenticationError(BillingError):
    """
    Raised when authentication fails.
    """
    def __init__(self, message: str = "Authentication failed", details: Optional[Any] = None):
        super().__init__(message, code="AUTHENTICATION_FAILED", status_code=401, details=details)

class ForbiddenError(BillingError):
    """
    Raised when an authenticated account may not perform an action.
    """
    def __init__(self, message: str = "Forbidden", details: Optional[Any] = None):
        super().__init__(message, code="FORBIDDEN", status_code=403, details=details)

class ResourceNotFoundError(BillingError):
    """
    Raised when a requested resource is not found or not owned by the caller.
    """
    def __init__(self, message: str = "Resource not found", details: Optional[Any] = None):
        super().__init__(message, code="NOT_FOUND", status_code=404, details=details)

class ConflictError(BillingError):
    """
    Raised when a create would duplicate an existing record.
    """
    def __init__(self, message: str = "Resource already exists", details: Optional[Any] = None):
        super().__init__(message, code="CONFLICT", status_code=409, details=details)

class ExternalServiceError(BillingError):
    """
    Raised when an external service (e.g., SMS gateway) fails.
    """
    def __init__(self, message: str = "External service error", details: Optional[Any] = None):
        super().__init__(message, code="EXTERNAL_SERVICE_ERROR", status_code=502, details=details)
