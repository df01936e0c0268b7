"""
Textcraft Types Module

Error codes and event schemas shared by the service layer.
"""

from .error_events import ErrorCode, ServiceErrorEvent, format_error

__all__ = [
    "ErrorCode",
    "ServiceErrorEvent",
    "format_error",
]
