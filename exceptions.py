"""
Custom exceptions for the Pi-hole toggle proxy
"""

from typing import Optional


class ConfigurationError(Exception):
    """Raised when configuration validation fails"""
    pass


class ValidationError(Exception):
    """Raised when a request body is missing required fields"""
    pass


class UpstreamError(Exception):
    """Raised when a call to the Pi-hole API fails"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code
