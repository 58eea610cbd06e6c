"""
Service Exceptions

Raised by the service layer and translated to HTTP responses by the controllers.
"""


class LynixServiceError(ValueError):
    """Base exception for service errors"""
    pass


class NotFoundError(LynixServiceError):
    """Raised when a row does not exist or is not owned by the caller"""
    pass


class ValidationFailedError(LynixServiceError):
    """Raised when request data is missing or malformed"""
    pass


class DuplicateError(LynixServiceError):
    """Raised when a unique value is already taken"""
    pass


class PermissionDeniedError(LynixServiceError):
    """Raised when the caller may not change the requested fields"""
    pass


class InvalidCallTransitionError(LynixServiceError):
    """Raised when a call status change is not a legal transition"""

    def __init__(self, current: str, target: str):
        self.current = current
        self.target = target
        super().__init__(f"Cannot move call from '{current}' to '{target}'")


class AIServiceUnavailableError(LynixServiceError):
    """Raised when the AI backend is not configured"""
    pass


class AIServiceError(LynixServiceError):
    """Raised when the AI backend call fails"""
    pass
