"""
exceptions.py
Error types raised by the catalog and input validation
"""

from typing import Optional


class RestaurantDiscoveryError(Exception):
    """Base class for discovery engine errors"""


class ValidationError(RestaurantDiscoveryError, ValueError):
    """Raised when user-supplied data fails a field rule"""

    def __init__(self, message: str, field: Optional[str] = None,
                 error_code: str = "VALIDATION_ERROR"):
        super().__init__(message)
        self.message = message
        self.field = field
        self.error_code = error_code

    def to_dict(self) -> dict:
        return {"error": self.message, "field": self.field, "error_code": self.error_code}


class RestaurantNotFoundError(RestaurantDiscoveryError, LookupError):
    """Raised when a restaurant id is not in the catalog"""

    def __init__(self, message: str, restaurant_id: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.restaurant_id = restaurant_id
