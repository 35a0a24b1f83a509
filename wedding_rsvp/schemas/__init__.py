"""
Pydantic schemas package
"""

from .common import *
from .guest import *
from .admin import *

__all__ = [
    "StandardResponse",
    "ErrorResponse",
    "RequestModel",
    "LookupRequest",
    "GuestLookupResult",
    "RsvpSubmitRequest",
    "AddressRequest",
    "AddressInfo",
    "SaveTheDateInfo",
    "GuestCreate",
    "GuestResponse",
    "GuestSummary",
    "AddressWebhookPayload",
]
