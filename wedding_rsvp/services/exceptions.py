"""
Service-layer exceptions, mapped to HTTP responses in main.py
"""

class ServiceError(Exception):
    code = "service_error"
    status_code = 500

    def __init__(self, message: str | None = None, details=None) -> None:
        self.message = message or self.code
        self.details = details
        super().__init__(self.message)

class ValidationError(ServiceError):
    code = "validation_error"
    status_code = 400

class NotFoundError(ServiceError):
    code = "not_found"
    status_code = 404

class ConflictError(ServiceError):
    code = "conflict"
    status_code = 409

class PersistenceError(ServiceError):
    """The guest store could not be read or written"""
    code = "persistence_error"
    status_code = 500

class NotificationError(ServiceError):
    """Email dispatch failed; never surfaced to guest-facing callers"""
    code = "notification_error"
    status_code = 500

class CodeGenerationError(ServiceError):
    code = "code_generation_failed"
    status_code = 500
