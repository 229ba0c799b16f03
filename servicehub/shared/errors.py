"""Domain errors raised by the service layer and mapped to HTTP responses in main.py"""

from typing import Optional


class ServiceHubError(Exception):
    """Base class for recoverable business errors"""

    status_code = 400

    def __init__(self, detail: str, *, field: Optional[str] = None):
        super().__init__(detail)
        self.detail = detail
        self.field = field


class ValidationError(ServiceHubError):
    """Malformed or out-of-range input (missing field, percentage outside 0-100, hours <= 0)"""

    status_code = 422


class NotFound(ServiceHubError):
    """Unknown work item, employee, service or vehicle"""

    status_code = 404


class InvalidTransition(ServiceHubError):
    """Operation not allowed in the work item's current status"""

    status_code = 409
