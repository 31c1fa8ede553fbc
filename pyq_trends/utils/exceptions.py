"""
Custom exceptions for the application.
"""


class PYQServiceException(Exception):
    """Base exception for all PYQ service errors."""
    status_code = 500


class InvalidFilterError(PYQServiceException):
    """Raised when a question filter cannot be satisfied (e.g. missing exam code)."""
    status_code = 400


class StoreError(PYQServiceException):
    """Raised when the question store query fails."""
    status_code = 503


class SeedDataError(PYQServiceException):
    """Raised when seed input contains no usable question records."""
    status_code = 400
